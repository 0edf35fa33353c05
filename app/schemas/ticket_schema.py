from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional
from enums.ticket_category import TicketCategory
from enums.ticket_priority import TicketPriority
from enums.ticket_status import TicketStatus
from utils.dates import to_naive_utc, utcnow


def _future_due_date(value: Optional[datetime]) -> Optional[datetime]:
    value = to_naive_utc(value)
    if value is not None and value <= utcnow():
        raise ValueError("Due date must be in the future")
    return value


class TicketCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    category: TicketCategory = TicketCategory.OTHER
    priority: TicketPriority = TicketPriority.MEDIUM
    property_id: Optional[int] = None
    unit: Optional[str] = Field(None, max_length=20)
    room: Optional[str] = Field(None, max_length=100)
    for_tenant_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    company_id: Optional[int] = None
    due_date: Optional[datetime] = None
    estimated_cost: float = Field(0, ge=0)

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return _future_due_date(value)


class TicketUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    property_id: Optional[int] = None
    unit: Optional[str] = Field(None, max_length=20)
    room: Optional[str] = Field(None, max_length=100)
    assigned_to_id: Optional[int] = None
    company_id: Optional[int] = None
    status: Optional[TicketStatus] = None
    due_date: Optional[datetime] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    is_archived: Optional[bool] = None

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value):
        return _future_due_date(value)


class TicketStatusUpdate(BaseModel):
    status: TicketStatus
    notes: Optional[str] = Field(None, max_length=500)


class CommentCreate(BaseModel):
    message: str
    is_internal: bool = False

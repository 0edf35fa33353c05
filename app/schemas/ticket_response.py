from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime
from enums.ticket_action import TicketAction
from enums.ticket_category import TicketCategory
from enums.ticket_priority import TicketPriority
from enums.ticket_status import TicketStatus
from .auth_schema import UserMinimumResponse
from .company_schema import CompanyMinimumResponse
from .property_response import PropertyMinimumResponse


class TicketHistoryResponse(BaseModel):
    id: int
    action: TicketAction
    status: Optional[TicketStatus] = None
    previous_status: Optional[TicketStatus] = None
    updated_by_id: int
    notes: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketCommentResponse(BaseModel):
    id: int
    message: str
    author: UserMinimumResponse
    is_internal: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketResponse(BaseModel):
    id: int
    ticket_id: Optional[str] = None
    title: str
    description: str
    category: TicketCategory
    priority: TicketPriority
    status: TicketStatus
    created_by: UserMinimumResponse
    for_tenant: UserMinimumResponse
    assigned_to: Optional[UserMinimumResponse] = None
    company: Optional[CompanyMinimumResponse] = None
    property: PropertyMinimumResponse
    unit: str
    room: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_cost: float = 0
    actual_cost: float = 0
    is_archived: bool = False
    is_overdue: bool = False
    days_since_creation: int = 0
    history: List[TicketHistoryResponse] = []
    comments: List[TicketCommentResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from enums.property_type import PropertyType
from enums.unit_type import UnitType


class UnitResponse(BaseModel):
    id: int
    unit_number: str
    unit_type: UnitType
    floor: Optional[int] = None
    is_occupied: bool
    tenant_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class PropertyMinimumResponse(BaseModel):
    id: int
    property_id: Optional[str] = None
    name: str
    city: str

    model_config = ConfigDict(from_attributes=True)


class PropertyResponse(BaseModel):
    id: int
    property_id: Optional[str] = None
    name: str
    street: str
    city: str
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str
    full_address: str
    property_type: PropertyType
    total_units: int
    amenities: List[str] = []
    owner_id: int
    is_active: bool
    units: List[UnitResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

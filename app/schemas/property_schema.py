from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from enums.property_type import PropertyType


class Address(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str = "South Africa"


class PropertyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    address: Address
    property_type: PropertyType = PropertyType.APARTMENT
    total_units: int = Field(..., ge=1, le=2600)
    amenities: List[str] = []
    manager_ids: List[int] = []


class AssignTenantRequest(BaseModel):
    unit_number: str
    tenant_id: int


class VacateUnitRequest(BaseModel):
    unit_number: str

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from enums.company_category import CompanyCategory


class CompanyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    category: CompanyCategory
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    service_property_ids: List[int] = []


class CompanyMinimumResponse(BaseModel):
    id: int
    name: str
    category: CompanyCategory
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CompanyResponse(BaseModel):
    id: int
    name: str
    category: CompanyCategory
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    owner_id: int
    service_property_ids: List[int] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_company(cls, company) -> "CompanyResponse":
        response = cls.model_validate(company)
        response.service_property_ids = [p.id for p in company.service_properties]
        return response

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from enums.user_role import UserRole


class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.TENANT
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9\s\-\(\)]{7,15}$")
    property_id: Optional[int] = None
    unit: Optional[str] = None
    email_notifications: bool = True
    sms_notifications: bool = False


class UserUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9\s\-\(\)]{7,15}$")
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    email_notifications: Optional[bool] = None
    sms_notifications: Optional[bool] = None


class AssignPropertiesRequest(BaseModel):
    property_ids: List[int]


class UserMinimumResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    assigned_property_id: Optional[int] = None
    assigned_unit: Optional[str] = None
    managed_property_ids: List[int] = []
    email_notifications: bool = True
    sms_notifications: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        response = cls.model_validate(user)
        response.managed_property_ids = [p.id for p in user.managed_properties]
        return response

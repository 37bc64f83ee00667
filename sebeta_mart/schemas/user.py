from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from sebeta_mart.models.user import UserRole, SELF_REGISTER_ROLES, STAFF_ROLES

PHONE_PATTERN = r"^\+?\d{10,15}$"


class UserBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str = Field(..., pattern=PHONE_PATTERN)

    @field_validator("full_name")
    @classmethod
    def _full_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.lower()


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: UserRole

    @field_validator("role")
    @classmethod
    def _self_register_role(cls, v: UserRole) -> UserRole:
        if v not in SELF_REGISTER_ROLES:
            raise ValueError("Invalid role")
        return v


class StaffUserCreate(UserBase):
    """Admin-only registration of admins and city clerks"""
    password: str = Field(..., min_length=6)
    role: UserRole

    @field_validator("role")
    @classmethod
    def _staff_role(cls, v: UserRole) -> UserRole:
        if v not in STAFF_ROLES:
            raise ValueError("Role must be either 'admin' or 'city-clerk'")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserStatusUpdate(BaseModel):
    is_active: Optional[bool] = None

"""
User Schemas
Pydantic models for user-related requests and responses
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from purchase_portal.schemas.common import PartialUpdate


class UserRoleEnum(str, Enum):
    """User role enumeration"""
    REQUESTER = "requester"
    APPROVER = "approver"
    ADMIN = "admin"


class UserBase(BaseModel):
    """Base user schema with common fields"""
    employee_number: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    mobile: Optional[str] = Field(None, max_length=20)
    department: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)


class UserSignup(UserBase):
    """Self-service signup; always creates a requester"""
    password: str = Field(..., min_length=8)


class UserCreate(UserBase):
    """Schema for admin user creation"""
    password: str = Field(..., min_length=8)
    role: UserRoleEnum = UserRoleEnum.REQUESTER
    is_active: bool = True


class UserUpdate(PartialUpdate):
    """Schema for admin user updates"""
    nullable = ("mobile", "password")

    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    mobile: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    role: Optional[UserRoleEnum] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)


class ProfileUpdate(PartialUpdate):
    """Fields a user may change on their own profile"""
    nullable = ("mobile",)

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=100)


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    employee_number: str
    full_name: str
    email: str
    mobile: Optional[str] = None
    department: str
    location: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

"""
Master Data Schemas
Create/update payloads for the admin master tables
"""

from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List

from purchase_portal.schemas.common import PartialUpdate


# ============================================
# ENTITY
# ============================================

class EntityCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_entity: Optional[str] = None
    is_active: bool = True


class EntityUpdate(PartialUpdate):
    nullable = ("description", "parent_entity")

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_entity: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================
# DEPARTMENT
# ============================================

class DepartmentCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    head_of_department: Optional[str] = None
    cost_center: Optional[str] = None
    is_active: bool = True


class DepartmentUpdate(PartialUpdate):
    nullable = ("description", "head_of_department", "cost_center")

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    head_of_department: Optional[str] = None
    cost_center: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================
# LOCATION
# ============================================

class LocationCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    is_active: bool = True


class LocationUpdate(PartialUpdate):
    nullable = ("address", "city", "state", "country")

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================
# ROLE
# ============================================

class RoleCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    level: int = Field(1, ge=1)
    permissions: List[str] = Field(default_factory=list)
    is_active: bool = True


class RoleUpdate(PartialUpdate):
    nullable = ("description", "permissions")

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    level: Optional[int] = Field(None, ge=1)
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None


# ============================================
# APPROVAL MATRIX
# ============================================

class ApprovalMatrixCreate(BaseModel):
    department: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)
    level: int = Field(..., ge=1)
    role: str = Field(..., min_length=1, max_length=100)
    min_amount: float = Field(0, ge=0)
    max_amount: Optional[float] = Field(None, ge=0)
    is_active: bool = True

    @model_validator(mode='after')
    def validate_band(self):
        if self.max_amount is not None and self.max_amount < self.min_amount:
            raise ValueError("max_amount must be greater than or equal to min_amount")
        return self


class ApprovalMatrixUpdate(PartialUpdate):
    nullable = ("max_amount",)

    department: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[int] = Field(None, ge=1)
    role: Optional[str] = Field(None, min_length=1, max_length=100)
    min_amount: Optional[float] = Field(None, ge=0)
    max_amount: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


# ============================================
# ESCALATION MATRIX
# ============================================

class EscalationMatrixCreate(BaseModel):
    site: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=100)
    escalation_days: int = Field(3, ge=1)
    escalation_level: int = Field(1, ge=1)
    approver_name: str = Field(..., min_length=1, max_length=255)
    approver_email: EmailStr
    is_active: bool = True


class EscalationMatrixUpdate(PartialUpdate):
    site: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    escalation_days: Optional[int] = Field(None, ge=1)
    escalation_level: Optional[int] = Field(None, ge=1)
    approver_name: Optional[str] = Field(None, min_length=1, max_length=255)
    approver_email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


# ============================================
# INVENTORY
# ============================================

class InventoryCreate(BaseModel):
    item_code: str = Field(..., min_length=1, max_length=50)
    type: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(0, ge=0)
    unit_of_measure: str = Field(..., min_length=1, max_length=50)
    location: Optional[str] = None
    is_active: bool = True


class InventoryUpdate(PartialUpdate):
    nullable = ("type", "location")

    item_code: Optional[str] = Field(None, min_length=1, max_length=50)
    type: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    unit_of_measure: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================
# VENDOR
# ============================================

class VendorCreate(BaseModel):
    vendor_code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    category: Optional[str] = None
    payment_terms: Optional[str] = None
    is_active: bool = True


class VendorUpdate(PartialUpdate):
    nullable = ("contact_person", "email", "phone", "category", "payment_terms")

    vendor_code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    category: Optional[str] = None
    payment_terms: Optional[str] = None
    is_active: Optional[bool] = None

"""
Purchase Request Schemas
Pydantic models for requisitions, line items and attachments
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from purchase_portal.schemas.approval import ApprovalHistoryResponse
from purchase_portal.schemas.common import PartialUpdate
from purchase_portal.schemas.user import UserResponse


# ============================================================================
# LINE ITEMS
# ============================================================================

class LineItemCreate(BaseModel):
    """Schema for adding a line item"""
    item_name: str = Field(..., min_length=1, max_length=255)
    required_quantity: int = Field(..., ge=1)
    unit_of_measure: str = Field(..., min_length=1, max_length=50)
    required_by_date: datetime
    delivery_location: str = Field(..., min_length=1, max_length=255)
    unit_cost: float = Field(..., gt=0)
    item_justification: Optional[str] = None
    stock_available: int = Field(0, ge=0)
    stock_location: Optional[str] = None


class LineItemUpdate(PartialUpdate):
    """Schema for editing a line item"""
    nullable = ("item_justification", "stock_location")

    item_name: Optional[str] = Field(None, min_length=1, max_length=255)
    required_quantity: Optional[int] = Field(None, ge=1)
    unit_of_measure: Optional[str] = Field(None, min_length=1, max_length=50)
    required_by_date: Optional[datetime] = None
    delivery_location: Optional[str] = Field(None, min_length=1, max_length=255)
    unit_cost: Optional[float] = Field(None, gt=0)
    item_justification: Optional[str] = None
    stock_available: Optional[int] = Field(None, ge=0)
    stock_location: Optional[str] = None


class LineItemResponse(BaseModel):
    id: int
    purchase_request_id: int
    item_name: str
    required_quantity: int
    unit_of_measure: str
    required_by_date: datetime
    delivery_location: str
    unit_cost: float
    line_total: float
    item_justification: Optional[str] = None
    stock_available: Optional[int] = None
    stock_location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# ATTACHMENTS
# ============================================================================

class AttachmentResponse(BaseModel):
    id: int
    purchase_request_id: int
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    file_path: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# PURCHASE REQUESTS
# ============================================================================

class PurchaseRequestBase(BaseModel):
    """Base purchase request schema"""
    title: str = Field(..., min_length=1, max_length=255)
    request_date: datetime
    department: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)
    business_justification_code: str = Field(..., min_length=1, max_length=50)
    business_justification_details: str = Field(..., min_length=10)


class PurchaseRequestCreate(PurchaseRequestBase):
    """Schema for submitting a new purchase request"""
    line_items: List[LineItemCreate] = Field(default_factory=list)


class PurchaseRequestUpdate(PartialUpdate):
    """Header fields editable while a request is submitted or returned"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    request_date: Optional[datetime] = None
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    business_justification_code: Optional[str] = Field(None, min_length=1, max_length=50)
    business_justification_details: Optional[str] = Field(None, min_length=10)


class PurchaseRequestResponse(PurchaseRequestBase):
    """Schema for purchase request response"""
    id: int
    requisition_number: str
    status: str
    current_approval_level: int
    total_estimated_cost: float
    requester_id: int
    current_approver_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PurchaseRequestDetail(PurchaseRequestResponse):
    """Request together with its children"""
    requester: Optional[UserResponse] = None
    line_items: List[LineItemResponse] = []
    attachments: List[AttachmentResponse] = []
    approval_history: List[ApprovalHistoryResponse] = []


class PurchaseRequestListResponse(BaseModel):
    """Schema for list of purchase requests"""
    total: int
    requests: List[PurchaseRequestResponse]


class DashboardStats(BaseModel):
    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    returned_requests: int
    total_value: float

"""
Approval Schemas
Pydantic models for approval workflow
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ApprovalActionRequest(BaseModel):
    """Schema for approve/reject/return/cancel actions"""
    comments: Optional[str] = None


class ApprovalHistoryResponse(BaseModel):
    """Schema for an approval history entry"""
    id: int
    purchase_request_id: int
    approver_id: int
    approver_name: Optional[str] = None
    action: str
    comments: Optional[str] = None
    approval_level: int
    action_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkflowActionResponse(BaseModel):
    """Result of a lifecycle transition"""
    success: bool = True
    message: str
    requisition_number: str
    status: str
    current_approval_level: int

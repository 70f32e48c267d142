"""
Purchase Request Routes
Requisition submission, lifecycle actions, line items and attachments
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Optional

from purchase_portal.config.database import get_db
from purchase_portal.models.purchase_request import RequestStatus
from purchase_portal.services.auth_service import RequestContext, get_request_context, require_approver
from purchase_portal.services.attachment_service import attachment_service
from purchase_portal.services.line_item_service import line_item_service
from purchase_portal.services.purchase_request_service import purchase_request_service
from purchase_portal.schemas.approval import (
    ApprovalActionRequest,
    ApprovalHistoryResponse,
    WorkflowActionResponse,
)
from purchase_portal.schemas.purchase_request import (
    AttachmentResponse,
    LineItemCreate,
    LineItemResponse,
    LineItemUpdate,
    PurchaseRequestCreate,
    PurchaseRequestDetail,
    PurchaseRequestListResponse,
    PurchaseRequestResponse,
    PurchaseRequestUpdate,
)
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


def _action_response(request, message: str) -> WorkflowActionResponse:
    return WorkflowActionResponse(
        message=message,
        requisition_number=request.requisition_number,
        status=request.status,
        current_approval_level=request.current_approval_level,
    )


# ============================================
# REQUESTS
# ============================================

@router.post("", response_model=PurchaseRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_request(
    data: PurchaseRequestCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Submit a new purchase request

    **Flow:**
    1. Validate required fields
    2. Generate requisition number (PR-<DEPT>-<YYYYMM>-<seq>)
    3. Store with status submitted at approval level 1
    4. Insert any nested line items and roll up the total
    5. Notify the requester
    """
    return purchase_request_service.create_request(db, ctx, data)


@router.get("", response_model=PurchaseRequestListResponse)
async def list_purchase_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    department: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    List purchase requests

    **Parameters:**
    - status: Filter by lifecycle status
    - department: Filter by department
    - date_from / date_to: Filter by request date
    - skip / limit: Pagination

    Requesters only see their own requests.
    """
    total, requests = purchase_request_service.list_requests(
        db,
        ctx,
        status_filter=status_filter.value if status_filter else None,
        department=department,
        date_from=date_from,
        date_to=date_to,
        skip=skip,
        limit=limit,
    )
    return PurchaseRequestListResponse(
        total=total,
        requests=[PurchaseRequestResponse.model_validate(request) for request in requests]
    )


@router.get("/{request_id}", response_model=PurchaseRequestResponse)
async def get_purchase_request(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return purchase_request_service.get_visible_request(db, ctx, request_id)


@router.get("/{request_id}/details", response_model=PurchaseRequestDetail)
async def get_purchase_request_details(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Request with requester, line items, attachments and approval history (newest first)"""
    request = purchase_request_service.get_request_details(db, ctx, request_id)

    detail = PurchaseRequestDetail.model_validate(request)
    detail.approval_history = sorted(
        detail.approval_history,
        key=lambda entry: (entry.action_date or datetime.min, entry.id),
        reverse=True,
    )
    return detail


@router.put("/{request_id}", response_model=PurchaseRequestResponse)
async def update_purchase_request(
    request_id: int,
    data: PurchaseRequestUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return purchase_request_service.update_request(db, ctx, request_id, data)


# ============================================
# LIFECYCLE ACTIONS
# ============================================

@router.post("/{request_id}/approve", response_model=WorkflowActionResponse)
async def approve_purchase_request(
    request_id: int,
    action: ApprovalActionRequest = ApprovalActionRequest(),
    ctx: RequestContext = Depends(require_approver),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.approve(db, ctx, request_id, action.comments)
    return _action_response(request, "Purchase request approved successfully")


@router.post("/{request_id}/reject", response_model=WorkflowActionResponse)
async def reject_purchase_request(
    request_id: int,
    action: ApprovalActionRequest = ApprovalActionRequest(),
    ctx: RequestContext = Depends(require_approver),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.reject(db, ctx, request_id, action.comments)
    return _action_response(request, "Purchase request rejected")


@router.post("/{request_id}/return", response_model=WorkflowActionResponse)
async def return_purchase_request(
    request_id: int,
    action: ApprovalActionRequest = ApprovalActionRequest(),
    ctx: RequestContext = Depends(require_approver),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.return_request(db, ctx, request_id, action.comments)
    return _action_response(request, "Purchase request returned to requester")


@router.post("/{request_id}/resubmit", response_model=WorkflowActionResponse)
async def resubmit_purchase_request(
    request_id: int,
    action: ApprovalActionRequest = ApprovalActionRequest(),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.resubmit(db, ctx, request_id, action.comments)
    return _action_response(request, "Purchase request resubmitted")


@router.post("/{request_id}/cancel", response_model=WorkflowActionResponse)
async def cancel_purchase_request(
    request_id: int,
    action: ApprovalActionRequest = ApprovalActionRequest(),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.cancel(db, ctx, request_id, action.comments)
    return _action_response(request, "Purchase request cancelled")


@router.get("/{request_id}/history", response_model=List[ApprovalHistoryResponse])
async def get_approval_history(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return purchase_request_service.get_history(db, ctx, request_id)


# ============================================
# LINE ITEMS
# ============================================

@router.get("/{request_id}/line-items", response_model=List[LineItemResponse])
async def list_line_items(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_visible_request(db, ctx, request_id)
    return line_item_service.list_items(db, request.id)


@router.post("/{request_id}/line-items", response_model=LineItemResponse, status_code=status.HTTP_201_CREATED)
async def add_line_item(
    request_id: int,
    data: LineItemCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_editable_request(db, ctx, request_id)
    return line_item_service.add_item(db, request, data)


@router.put("/{request_id}/line-items/{item_id}", response_model=LineItemResponse)
async def update_line_item(
    request_id: int,
    item_id: int,
    data: LineItemUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_editable_request(db, ctx, request_id)
    return line_item_service.update_item(db, request, item_id, data)


@router.delete("/{request_id}/line-items/{item_id}")
async def delete_line_item(
    request_id: int,
    item_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_editable_request(db, ctx, request_id)
    line_item_service.delete_item(db, request, item_id)
    db.refresh(request)

    return {
        "success": True,
        "message": "Line item deleted",
        "total_estimated_cost": request.total_estimated_cost
    }


# ============================================
# ATTACHMENTS
# ============================================

@router.get("/{request_id}/attachments", response_model=List[AttachmentResponse])
async def list_attachments(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_visible_request(db, ctx, request_id)
    return attachment_service.list_attachments(db, request.id)


@router.post("/{request_id}/attachments", response_model=List[AttachmentResponse], status_code=status.HTTP_201_CREATED)
async def upload_attachments(
    request_id: int,
    files: List[UploadFile] = File(...),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Upload supporting documents

    **Limits:** up to 10 files per upload, 10MB each; PDF, Word, Excel
    and images only.
    """
    request = purchase_request_service.get_editable_request(db, ctx, request_id)
    return attachment_service.add_attachments(db, request, files)


@router.delete("/{request_id}/attachments/{attachment_id}")
async def delete_attachment(
    request_id: int,
    attachment_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    request = purchase_request_service.get_editable_request(db, ctx, request_id)
    attachment_service.delete_attachment(db, request, attachment_id)

    return {"success": True, "message": "Attachment deleted"}

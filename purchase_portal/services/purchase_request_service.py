"""
Purchase Request Service
Business logic for the requisition lifecycle

Lifecycle: submitted -> (pending) -> approved | rejected | returned,
with returned -> submitted on resubmission and cancellation by the
requester. Each transition appends an approval history row, updates the
request and notifies the requester inside one transaction.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from purchase_portal.config.database import atomic
from purchase_portal.config.settings import settings
from purchase_portal.models.approval import ApprovalAction, ApprovalHistory
from purchase_portal.models.master_data import ApprovalMatrix
from purchase_portal.models.user import UserRole
from purchase_portal.models.purchase_request import (
    LineItem,
    PurchaseRequest,
    RequestStatus,
)
from purchase_portal.services.auth_service import RequestContext
from purchase_portal.services.email_service import email_service
from purchase_portal.services.line_item_service import line_item_service
from purchase_portal.services.notification_service import notification_service
from purchase_portal.utils.helpers import year_month
from purchase_portal.utils.logger import setup_logger, log_audit

logger = setup_logger()


# Statuses each action may start from
ALLOWED_TRANSITIONS: Dict[ApprovalAction, set] = {
    ApprovalAction.APPROVE: {RequestStatus.SUBMITTED.value, RequestStatus.PENDING.value},
    ApprovalAction.REJECT: {RequestStatus.SUBMITTED.value, RequestStatus.PENDING.value},
    ApprovalAction.RETURN: {
        RequestStatus.SUBMITTED.value,
        RequestStatus.PENDING.value,
        RequestStatus.APPROVED.value,
    },
    ApprovalAction.RESUBMIT: {RequestStatus.RETURNED.value},
    ApprovalAction.CANCEL: {
        RequestStatus.SUBMITTED.value,
        RequestStatus.PENDING.value,
        RequestStatus.RETURNED.value,
    },
}


def requisition_prefix(department: str, moment: Optional[datetime] = None) -> str:
    """PR-<DEPT4>-<YYYYMM> prefix shared by a department's requests in a month"""
    dept_code = department.strip()[:4].upper()
    return f"PR-{dept_code}-{year_month(moment or datetime.now())}"


class PurchaseRequestService:
    """Service for purchase request lifecycle"""

    # ============================================
    # REQUISITION NUMBERS
    # ============================================

    def generate_requisition_number(self, db: Session, department: str, moment: Optional[datetime] = None) -> str:
        """
        Next requisition number for the department and month

        Counts existing numbers with the same prefix, so two writers that
        count before either inserts receive the same number.
        """
        prefix = requisition_prefix(department, moment)
        existing = db.query(func.count(PurchaseRequest.id)).filter(
            PurchaseRequest.requisition_number.like(f"{prefix}-%")
        ).scalar()
        return f"{prefix}-{existing + 1:03d}"

    # ============================================
    # LOOKUPS AND ACCESS
    # ============================================

    def get_request(self, db: Session, request_id: int) -> PurchaseRequest:
        request = db.query(PurchaseRequest).filter(PurchaseRequest.id == request_id).first()
        if not request:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Purchase request not found"
            )
        return request

    def get_visible_request(self, db: Session, ctx: RequestContext, request_id: int) -> PurchaseRequest:
        """Requesters see their own requests; approvers and admins see all"""
        request = self.get_request(db, request_id)
        if request.requester_id != ctx.user_id and not ctx.user.can_approve:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return request

    def get_owned_request(self, db: Session, ctx: RequestContext, request_id: int) -> PurchaseRequest:
        """Only the requester or an admin may change a request"""
        request = self.get_request(db, request_id)
        if request.requester_id != ctx.user_id and not ctx.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return request

    def get_editable_request(self, db: Session, ctx: RequestContext, request_id: int) -> PurchaseRequest:
        request = self.get_owned_request(db, ctx, request_id)
        if not request.is_editable:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Purchase request cannot be modified while {request.status}"
            )
        return request

    def get_request_details(self, db: Session, ctx: RequestContext, request_id: int) -> PurchaseRequest:
        self.get_visible_request(db, ctx, request_id)
        return db.query(PurchaseRequest).options(
            joinedload(PurchaseRequest.requester),
            selectinload(PurchaseRequest.line_items),
            selectinload(PurchaseRequest.attachments),
            selectinload(PurchaseRequest.approval_history).joinedload(ApprovalHistory.approver),
        ).filter(PurchaseRequest.id == request_id).first()

    # ============================================
    # CREATE / UPDATE
    # ============================================

    def create_request(self, db: Session, ctx: RequestContext, data) -> PurchaseRequest:
        """
        Submit a new purchase request

        Generates the requisition number, stores the request at level 1 with
        status submitted, inserts any nested line items, rolls up the total
        and notifies the requester. A unique-number collision retries with a
        freshly counted number.
        """
        header = data.model_dump(exclude={"line_items"})

        for attempt in range(1, settings.REQUISITION_NUMBER_RETRIES + 1):
            requisition_number = self.generate_requisition_number(db, data.department)
            request = PurchaseRequest(
                **header,
                requisition_number=requisition_number,
                status=RequestStatus.SUBMITTED.value,
                current_approval_level=1,
                total_estimated_cost=0.0,
                requester_id=ctx.user_id,
            )

            try:
                with atomic(db):
                    db.add(request)
                    db.flush()
                    for item in data.line_items:
                        db.add(LineItem(purchase_request_id=request.id, **item.model_dump()))
                    db.flush()
                    line_item_service.apply_rollup(db, request)
                    notification_service.notify_request_submitted(db, request)
            except IntegrityError:
                logger.warning(
                    f"Requisition number {requisition_number} already taken "
                    f"(attempt {attempt}/{settings.REQUISITION_NUMBER_RETRIES})"
                )
                continue

            db.refresh(request)
            log_audit(ctx.user_id, "create_purchase_request", f"{request.requisition_number} total={request.total_estimated_cost}")
            logger.info(f"Purchase request {request.requisition_number} submitted by user {ctx.user_id}")
            return request

        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not allocate a unique requisition number. Please retry."
        )

    def update_request(self, db: Session, ctx: RequestContext, request_id: int, data) -> PurchaseRequest:
        """Edit header fields while the request is submitted or returned"""
        request = self.get_editable_request(db, ctx, request_id)
        changes = data.model_dump(exclude_unset=True)

        with atomic(db):
            for field, value in changes.items():
                setattr(request, field, value)
        db.refresh(request)

        log_audit(ctx.user_id, "update_purchase_request", f"{request.requisition_number} fields={sorted(changes)}")
        return request

    # ============================================
    # LIFECYCLE TRANSITIONS
    # ============================================

    def _ensure_transition(self, request: PurchaseRequest, action: ApprovalAction):
        if request.status not in ALLOWED_TRANSITIONS[action]:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot {action.value} a purchase request that is {request.status}"
            )

    def _record_action(
        self,
        db: Session,
        request: PurchaseRequest,
        ctx: RequestContext,
        action: ApprovalAction,
        comments: Optional[str]
    ) -> ApprovalHistory:
        entry = ApprovalHistory(
            purchase_request_id=request.id,
            approver_id=ctx.user_id,
            action=action.value,
            comments=comments,
            approval_level=request.current_approval_level,
        )
        db.add(entry)
        return entry

    def _email_requester(self, request: PurchaseRequest, comments: Optional[str]):
        """Best-effort status email; the in-app notification is already committed"""
        requester = request.requester
        if not requester or not requester.email:
            return
        email_service.send_request_status_update(
            to_email=requester.email,
            full_name=requester.full_name,
            requisition_number=request.requisition_number,
            status=request.status,
            total=request.total_estimated_cost,
            comments=comments,
        )

    def _matrix_rows(self, db: Session, request: PurchaseRequest) -> List[ApprovalMatrix]:
        """Active approval matrix rows for the request whose band covers its total"""
        rows = db.query(ApprovalMatrix).filter(
            ApprovalMatrix.department == request.department,
            ApprovalMatrix.location == request.location,
            ApprovalMatrix.is_active == True  # noqa: E712
        ).all()
        return [row for row in rows if row.covers(request.total_estimated_cost)]

    def required_approval_levels(self, db: Session, request: PurchaseRequest) -> int:
        """Number of active approval matrix levels covering the request total"""
        return len({row.level for row in self._matrix_rows(db, request)})

    def _ensure_matrix_role(self, db: Session, ctx: RequestContext, request: PurchaseRequest):
        """
        Check the caller holds the role the matrix assigns to the current level

        Admins may act at any level. Levels without a matrix row accept
        any approver.
        """
        if ctx.role == UserRole.ADMIN.value:
            return

        roles = {
            row.role for row in self._matrix_rows(db, request)
            if row.level == request.current_approval_level
        }
        if roles and ctx.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Approval level {request.current_approval_level} requires role: {', '.join(sorted(roles))}"
            )

    def approve(self, db: Session, ctx: RequestContext, request_id: int, comments: Optional[str] = None) -> PurchaseRequest:
        """
        Approve a purchase request

        Records the current level, increments it and marks the request
        approved. With ENFORCE_APPROVAL_MATRIX the caller must hold the role
        the matrix assigns to the current level, and the request stays
        pending until every matrix level covering its total has approved.
        """
        request = self.get_request(db, request_id)
        self._ensure_transition(request, ApprovalAction.APPROVE)
        if settings.ENFORCE_APPROVAL_MATRIX:
            self._ensure_matrix_role(db, ctx, request)

        with atomic(db):
            self._record_action(db, request, ctx, ApprovalAction.APPROVE, comments)
            request.current_approval_level += 1

            required_levels = 0
            if settings.ENFORCE_APPROVAL_MATRIX:
                required_levels = self.required_approval_levels(db, request)

            if request.current_approval_level <= required_levels:
                request.status = RequestStatus.PENDING.value
            else:
                request.status = RequestStatus.APPROVED.value

            notification_service.notify_request_approved(db, request, ctx.user.full_name, comments)

        db.refresh(request)
        self._email_requester(request, comments)
        log_audit(ctx.user_id, "approve_purchase_request", f"{request.requisition_number} -> {request.status} (level {request.current_approval_level})")
        logger.info(f"Purchase request {request.requisition_number} approved by {ctx.user.employee_number}. New status: {request.status}")
        return request

    def reject(self, db: Session, ctx: RequestContext, request_id: int, comments: Optional[str] = None) -> PurchaseRequest:
        request = self.get_request(db, request_id)
        self._ensure_transition(request, ApprovalAction.REJECT)

        with atomic(db):
            self._record_action(db, request, ctx, ApprovalAction.REJECT, comments)
            request.status = RequestStatus.REJECTED.value
            notification_service.notify_request_rejected(db, request, comments)

        db.refresh(request)
        self._email_requester(request, comments)
        log_audit(ctx.user_id, "reject_purchase_request", request.requisition_number)
        logger.info(f"Purchase request {request.requisition_number} rejected by {ctx.user.employee_number}")
        return request

    def return_request(self, db: Session, ctx: RequestContext, request_id: int, comments: Optional[str] = None) -> PurchaseRequest:
        """Send a request back to the requester and restart approvals at level 1"""
        request = self.get_request(db, request_id)
        self._ensure_transition(request, ApprovalAction.RETURN)

        with atomic(db):
            self._record_action(db, request, ctx, ApprovalAction.RETURN, comments)
            request.status = RequestStatus.RETURNED.value
            request.current_approval_level = 1
            notification_service.notify_request_returned(db, request, comments)

        db.refresh(request)
        self._email_requester(request, comments)
        log_audit(ctx.user_id, "return_purchase_request", request.requisition_number)
        logger.info(f"Purchase request {request.requisition_number} returned by {ctx.user.employee_number}")
        return request

    def resubmit(self, db: Session, ctx: RequestContext, request_id: int, comments: Optional[str] = None) -> PurchaseRequest:
        request = self.get_owned_request(db, ctx, request_id)
        self._ensure_transition(request, ApprovalAction.RESUBMIT)

        with atomic(db):
            self._record_action(db, request, ctx, ApprovalAction.RESUBMIT, comments)
            request.status = RequestStatus.SUBMITTED.value
            notification_service.notify_request_resubmitted(db, request)

        db.refresh(request)
        log_audit(ctx.user_id, "resubmit_purchase_request", request.requisition_number)
        return request

    def cancel(self, db: Session, ctx: RequestContext, request_id: int, comments: Optional[str] = None) -> PurchaseRequest:
        request = self.get_owned_request(db, ctx, request_id)
        self._ensure_transition(request, ApprovalAction.CANCEL)

        with atomic(db):
            self._record_action(db, request, ctx, ApprovalAction.CANCEL, comments)
            request.status = RequestStatus.CANCELLED.value
            notification_service.notify_request_cancelled(db, request, comments)

        db.refresh(request)
        log_audit(ctx.user_id, "cancel_purchase_request", request.requisition_number)
        return request

    # ============================================
    # QUERIES
    # ============================================

    def list_requests(
        self,
        db: Session,
        ctx: RequestContext,
        status_filter: Optional[str] = None,
        department: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[int, List[PurchaseRequest]]:
        query = db.query(PurchaseRequest)

        if not ctx.user.can_approve:
            query = query.filter(PurchaseRequest.requester_id == ctx.user_id)
        if status_filter:
            query = query.filter(PurchaseRequest.status == status_filter)
        if department:
            query = query.filter(PurchaseRequest.department == department)
        if date_from:
            query = query.filter(PurchaseRequest.request_date >= date_from)
        if date_to:
            query = query.filter(PurchaseRequest.request_date <= date_to)

        total = query.count()
        requests = query.order_by(
            PurchaseRequest.created_at.desc(), PurchaseRequest.id.desc()
        ).offset(skip).limit(limit).all()
        return total, requests

    def get_history(self, db: Session, ctx: RequestContext, request_id: int) -> List[ApprovalHistory]:
        self.get_visible_request(db, ctx, request_id)
        return db.query(ApprovalHistory).options(
            joinedload(ApprovalHistory.approver)
        ).filter(
            ApprovalHistory.purchase_request_id == request_id
        ).order_by(ApprovalHistory.action_date.desc(), ApprovalHistory.id.desc()).all()

    def get_stats(self, db: Session, ctx: RequestContext) -> dict:
        """Dashboard counts; requesters only see their own requests"""
        query = db.query(PurchaseRequest.status, func.count(PurchaseRequest.id))
        value_query = db.query(func.coalesce(func.sum(PurchaseRequest.total_estimated_cost), 0.0)).filter(
            PurchaseRequest.status == RequestStatus.APPROVED.value
        )

        if not ctx.user.can_approve:
            query = query.filter(PurchaseRequest.requester_id == ctx.user_id)
            value_query = value_query.filter(PurchaseRequest.requester_id == ctx.user_id)

        counts = dict(query.group_by(PurchaseRequest.status).all())

        return {
            "total_requests": sum(counts.values()),
            "pending_requests": counts.get(RequestStatus.SUBMITTED.value, 0) + counts.get(RequestStatus.PENDING.value, 0),
            "approved_requests": counts.get(RequestStatus.APPROVED.value, 0),
            "rejected_requests": counts.get(RequestStatus.REJECTED.value, 0),
            "returned_requests": counts.get(RequestStatus.RETURNED.value, 0),
            "total_value": float(value_query.scalar() or 0.0),
        }


# Create singleton instance
purchase_request_service = PurchaseRequestService()

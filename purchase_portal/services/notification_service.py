"""
Notification Service
Handles creation and management of user notifications

Creation methods only stage rows on the session; the caller's
transaction commits them together with the workflow change.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from purchase_portal.models.notification import Notification, NotificationType
from purchase_portal.models.purchase_request import PurchaseRequest, RequestStatus
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()


class NotificationService:
    """Service for managing notifications"""

    def notify(
        self,
        db: Session,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        purchase_request_id: Optional[int] = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            purchase_request_id=purchase_request_id
        )
        db.add(notification)
        return notification

    def notify_request_submitted(self, db: Session, request: PurchaseRequest) -> Notification:
        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Submitted",
            message=f"Your purchase request {request.requisition_number} has been submitted successfully.",
            type=NotificationType.SUCCESS,
            purchase_request_id=request.id
        )

    def notify_request_approved(
        self,
        db: Session,
        request: PurchaseRequest,
        approver_name: str,
        comments: Optional[str] = None
    ) -> Notification:
        """
        Notify requester that their request was approved

        Args:
            db: Database session
            request: Approved request
            approver_name: Name of person who approved
            comments: Optional approval comments
        """
        if request.status == RequestStatus.APPROVED.value:
            message = f"Your purchase request {request.requisition_number} has been approved."
        else:
            message = (
                f"Your purchase request {request.requisition_number} was approved by {approver_name} "
                f"and is awaiting level {request.current_approval_level} approval."
            )
        if comments:
            message += f" Comments: {comments}"

        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Approved",
            message=message,
            type=NotificationType.SUCCESS,
            purchase_request_id=request.id
        )

    def notify_request_rejected(self, db: Session, request: PurchaseRequest, comments: Optional[str] = None) -> Notification:
        message = f"Your purchase request {request.requisition_number} has been rejected."
        if comments:
            message += f" {comments}"

        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Rejected",
            message=message,
            type=NotificationType.ERROR,
            purchase_request_id=request.id
        )

    def notify_request_returned(self, db: Session, request: PurchaseRequest, comments: Optional[str] = None) -> Notification:
        message = f"Your purchase request {request.requisition_number} has been returned for changes."
        if comments:
            message += f" {comments}"

        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Returned",
            message=message,
            type=NotificationType.WARNING,
            purchase_request_id=request.id
        )

    def notify_request_resubmitted(self, db: Session, request: PurchaseRequest) -> Notification:
        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Resubmitted",
            message=f"Your purchase request {request.requisition_number} has been resubmitted for approval.",
            type=NotificationType.INFO,
            purchase_request_id=request.id
        )

    def notify_request_cancelled(self, db: Session, request: PurchaseRequest, comments: Optional[str] = None) -> Notification:
        message = f"Your purchase request {request.requisition_number} has been cancelled."
        if comments:
            message += f" {comments}"

        return self.notify(
            db,
            user_id=request.requester_id,
            title="Purchase Request Cancelled",
            message=message,
            type=NotificationType.WARNING,
            purchase_request_id=request.id
        )

    def list_for_user(
        self,
        db: Session,
        user_id: int,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[int, int, List[Notification]]:
        """
        Get a user's notifications, newest first

        Returns:
            Tuple of (total, unread_count, notifications)
        """
        query = db.query(Notification).filter(Notification.user_id == user_id)

        if unread_only:
            query = query.filter(Notification.is_read == False)  # noqa: E712

        total = query.count()
        notifications = query.order_by(
            Notification.created_at.desc(), Notification.id.desc()
        ).offset(skip).limit(limit).all()

        return total, self.unread_count(db, user_id), notifications

    def unread_count(self, db: Session, user_id: int) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).count()

    def mark_read(self, db: Session, user_id: int, notification_id: int) -> Notification:
        notification = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).first()

        if not notification:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found"
            )

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            db.commit()
            db.refresh(notification)

        return notification

    def mark_all_read(self, db: Session, user_id: int) -> int:
        updated = db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).update({"is_read": True, "read_at": datetime.utcnow()}, synchronize_session=False)
        db.commit()

        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated


# Create singleton instance
notification_service = NotificationService()

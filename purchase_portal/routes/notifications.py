"""
Notification Routes
User notification management endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from purchase_portal.config.database import get_db
from purchase_portal.services.auth_service import RequestContext, get_request_context
from purchase_portal.services.notification_service import notification_service
from purchase_portal.schemas.notification import NotificationListResponse, NotificationResponse
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def get_my_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Get current user's notifications

    **Parameters:**
    - unread_only: If True, only return unread notifications
    - skip: Number of records to skip (pagination)
    - limit: Maximum number of records to return

    **Returns:**
    - total: Total notification count
    - unread_count: Count of unread notifications
    - notifications: Newest first
    """
    total, unread_count, notifications = notification_service.list_for_user(
        db, ctx.user_id, unread_only=unread_only, skip=skip, limit=limit
    )

    logger.info(f"User {ctx.user.employee_number} fetched {len(notifications)} notifications (unread: {unread_count})")

    return NotificationListResponse(
        total=total,
        unread_count=unread_count,
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.get("/unread-count")
async def get_unread_count(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Lightweight endpoint for polling"""
    return {
        "success": True,
        "unread_count": notification_service.unread_count(db, ctx.user_id)
    }


@router.put("/read-all")
async def mark_all_notifications_read(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    updated = notification_service.mark_all_read(db, ctx.user_id)
    return {
        "success": True,
        "message": f"{updated} notification(s) marked as read",
        "updated": updated
    }


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return notification_service.mark_read(db, ctx.user_id, notification_id)

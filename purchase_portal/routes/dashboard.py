"""
Dashboard Routes
Summary counts for the landing page
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from purchase_portal.config.database import get_db
from purchase_portal.services.auth_service import RequestContext, get_request_context
from purchase_portal.services.purchase_request_service import purchase_request_service
from purchase_portal.schemas.purchase_request import DashboardStats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Request counts by status and the approved total value

    Approvers and admins see figures for all requests, requesters for
    their own.
    """
    return purchase_request_service.get_stats(db, ctx)

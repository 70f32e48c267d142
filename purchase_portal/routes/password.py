"""
Password Reset Routes
Forgot password (OTP by email) and reset with OTP
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from purchase_portal.config.database import get_db
from purchase_portal.config.settings import settings
from purchase_portal.models.user import User
from purchase_portal.services.auth_service import auth_service
from purchase_portal.services.email_service import email_service
from purchase_portal.schemas.auth import ForgotPasswordRequest, ResetPasswordRequest
from purchase_portal.utils.logger import setup_logger, log_audit

logger = setup_logger()
router = APIRouter()


@router.post("/forgot-password")
async def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db)
):
    """
    Send OTP for password reset

    Flow:
    1. User enters email
    2. System sends 6-digit OTP to email
    3. OTP valid for PASSWORD_RESET_OTP_MINUTES

    The answer is the same whether or not the email is registered.
    """
    otp = auth_service.start_password_reset(db, request.email)

    if otp:
        user = db.query(User).filter(User.email == request.email).first()
        if not email_service.send_password_reset_otp(user.email, user.full_name, otp):
            logger.warning(f"OTP email could not be delivered to {user.email}")

    return {
        "success": True,
        "message": "If this email is registered, you will receive an OTP shortly.",
        "expires_in": f"{settings.PASSWORD_RESET_OTP_MINUTES} minutes"
    }


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Verify OTP and set the new password"""
    user = auth_service.complete_password_reset(db, request.email, request.otp, request.new_password)
    log_audit(user.id, "reset_password", "password reset with OTP")

    return {
        "success": True,
        "message": "Password reset successfully!"
    }

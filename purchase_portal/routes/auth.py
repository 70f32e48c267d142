"""
Authentication Routes
Login, signup, logout and profile management
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from purchase_portal.config.database import get_db
from purchase_portal.services.auth_service import auth_service, RequestContext, get_request_context
from purchase_portal.schemas.auth import UserLogin, LoginResponse, ChangePasswordRequest
from purchase_portal.schemas.user import UserResponse, UserSignup, ProfileUpdate
from purchase_portal.utils.logger import setup_logger, log_audit

logger = setup_logger()
router = APIRouter()


# ============================================
# ENDPOINT - LOGIN
# ============================================

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Login with employee number and password

    Sets the HttpOnly auth cookie and also returns the token for API clients.
    """
    user = auth_service.authenticate_user(db, credentials.employee_number, credentials.password)

    if not user:
        logger.warning(f"Failed login attempt for employee number {credentials.employee_number}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid employee number or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_service.create_token(user)
    auth_service.set_auth_cookie(response, token)

    logger.info(f"User logged in: {user.employee_number}")
    return LoginResponse(user=UserResponse.model_validate(user), access_token=token)


# ============================================
# ENDPOINT - SIGNUP
# ============================================

@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: UserSignup,
    response: Response,
    db: Session = Depends(get_db)
):
    """Self-service registration; new accounts are always requesters"""
    user = auth_service.register_user(db, data)

    token = auth_service.create_token(user)
    auth_service.set_auth_cookie(response, token)

    return LoginResponse(user=UserResponse.model_validate(user), access_token=token)


@router.post("/logout")
async def logout(response: Response):
    auth_service.clear_auth_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    ctx: RequestContext = Depends(get_request_context)
):
    """Get current user information"""
    return ctx.user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Update the caller's own profile fields"""
    user = ctx.user
    changes = data.model_dump(exclude_unset=True)

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    log_audit(user.id, "update_profile", f"fields={sorted(changes)}")
    return user


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    auth_service.change_password(db, ctx.user, data.current_password, data.new_password)
    log_audit(ctx.user_id, "change_password", f"ip={ctx.client_ip}")

    return {"success": True, "message": "Password changed successfully"}

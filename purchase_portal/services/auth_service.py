"""
Authentication Service
Handles user authentication, the request-scoped principal and authorization
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from purchase_portal.config.database import get_db
from purchase_portal.config.settings import settings
from purchase_portal.models.user import User, UserRole
from purchase_portal.utils.helpers import get_client_ip
from purchase_portal.utils.logger import setup_logger
from purchase_portal.utils.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_token,
    generate_otp,
)

logger = setup_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass
class RequestContext:
    """Authenticated principal for the duration of one HTTP call"""
    user: User
    client_ip: str = "unknown"

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role

    def has_role(self, *roles) -> bool:
        return self.user.has_role(*roles)

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN.value


class AuthService:
    """Authentication service"""

    def authenticate_user(self, db: Session, employee_number: str, password: str) -> Optional[User]:
        """
        Authenticate user with employee number and password

        Deactivated users are refused before the password is checked.

        Args:
            db: Database session
            employee_number: Employee number
            password: Password

        Returns:
            User: Authenticated user or None
        """
        user = db.query(User).filter(User.employee_number == employee_number).first()

        if not user or not user.is_active:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        user.last_login = datetime.utcnow()
        db.commit()

        logger.info(f"User authenticated: {user.employee_number}")
        return user

    def register_user(self, db: Session, data) -> User:
        """
        Create a self-registered requester account

        Raises:
            HTTPException: If employee number or email is already taken
        """
        if db.query(User).filter(User.employee_number == data.employee_number).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Employee number already exists"
            )

        if db.query(User).filter(User.email == data.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already exists"
            )

        user = User(
            employee_number=data.employee_number,
            full_name=data.full_name,
            email=data.email,
            mobile=data.mobile,
            department=data.department,
            location=data.location,
            hashed_password=get_password_hash(data.password),
            role=UserRole.REQUESTER.value,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"New user registered: {user.employee_number}")
        return user

    def create_token(self, user: User) -> str:
        """Create an access token for user"""
        return create_access_token(
            data={
                "sub": str(user.id),
                "employee_number": user.employee_number,
                "role": user.role,
            }
        )

    def set_auth_cookie(self, response: Response, token: str):
        response.set_cookie(
            key=settings.AUTH_COOKIE_NAME,
            value=token,
            httponly=True,
            secure=settings.AUTH_COOKIE_SECURE,
            samesite="lax",
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    def clear_auth_cookie(self, response: Response):
        response.delete_cookie(key=settings.AUTH_COOKIE_NAME)

    def change_password(self, db: Session, user: User, current_password: str, new_password: str):
        if not verify_password(current_password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect"
            )

        user.hashed_password = get_password_hash(new_password)
        db.commit()
        logger.info(f"Password changed for user {user.employee_number}")

    def start_password_reset(self, db: Session, email: str) -> Optional[str]:
        """
        Issue a password reset OTP

        Returns:
            str: Plain OTP to deliver, or None if no active user has this email
        """
        user = db.query(User).filter(User.email == email).first()
        if not user or not user.is_active:
            return None

        otp = generate_otp()
        user.reset_token = get_password_hash(otp)
        user.reset_token_expires_at = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_OTP_MINUTES)
        db.commit()

        logger.info(f"Password reset requested for user {user.employee_number}")
        return otp

    def complete_password_reset(self, db: Session, email: str, otp: str, new_password: str) -> User:
        """
        Verify OTP and set a new password

        Raises:
            HTTPException: If the user, OTP or its expiry do not check out
        """
        user = db.query(User).filter(User.email == email).first()

        if not user or not user.reset_token:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No password reset request found. Please request OTP first."
            )

        if not user.is_reset_token_valid():
            user.reset_token = None
            user.reset_token_expires_at = None
            db.commit()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="OTP has expired. Please request a new OTP."
            )

        if not verify_password(otp, user.reset_token):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid OTP. Please try again."
            )

        user.hashed_password = get_password_hash(new_password)
        user.last_password_reset = datetime.utcnow()
        user.reset_token = None  # one-time use
        user.reset_token_expires_at = None
        db.commit()
        db.refresh(user)

        logger.info(f"Password reset successfully for user {user.employee_number}")
        return user

    async def get_current_user(
        self,
        request: Request,
        token: Optional[str] = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Get current authenticated user from the bearer header or auth cookie

        Raises:
            HTTPException: If authentication fails
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

        token = token or request.cookies.get(settings.AUTH_COOKIE_NAME)
        if not token:
            raise credentials_exception

        payload = decode_token(token)
        if payload is None or payload.get("sub") is None:
            raise credentials_exception

        user = db.query(User).filter(User.id == int(payload["sub"])).first()
        if user is None or not user.is_active:
            raise credentials_exception

        return user

    def require_role(self, *roles: str):
        """
        Dependency factory resolving the caller into a RequestContext

        Args:
            roles: Accepted roles; no roles means any authenticated user
        """
        async def role_checker(
            request: Request,
            current_user: User = Depends(self.get_current_user)
        ) -> RequestContext:
            if roles and not current_user.has_role(*roles):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Forbidden"
                )
            return RequestContext(user=current_user, client_ip=get_client_ip(request))

        return role_checker


# Create singleton instance
auth_service = AuthService()

# Common dependencies
get_request_context = auth_service.require_role()
require_approver = auth_service.require_role(UserRole.APPROVER.value, UserRole.ADMIN.value)
require_admin = auth_service.require_role(UserRole.ADMIN.value)

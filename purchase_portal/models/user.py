"""
User Model
Represents portal users with role-based access control
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from purchase_portal.config.database import Base


class UserRole(str, enum.Enum):
    """User roles"""
    REQUESTER = "requester"
    APPROVER = "approver"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    employee_number = Column(String(50), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    mobile = Column(String(20), nullable=True)
    hashed_password = Column(String, nullable=False)

    # Scoping
    department = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False)

    # Role and status
    role = Column(String(50), default=UserRole.REQUESTER.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Password reset (forgot password with OTP)
    reset_token = Column(String(255), nullable=True)
    reset_token_expires_at = Column(DateTime, nullable=True)
    last_password_reset = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    purchase_requests = relationship(
        "PurchaseRequest", back_populates="requester", foreign_keys="PurchaseRequest.requester_id"
    )
    notifications = relationship("Notification", back_populates="user")

    def __repr__(self):
        return f"<User {self.employee_number} ({self.role})>"

    def has_role(self, *roles: str) -> bool:
        """Check if user holds one of the given roles"""
        return self.role in [r.value if isinstance(r, UserRole) else r for r in roles]

    @property
    def can_approve(self) -> bool:
        return self.has_role(UserRole.APPROVER, UserRole.ADMIN)

    def is_reset_token_valid(self) -> bool:
        """Check if password reset token (OTP) is still valid"""
        if not self.reset_token:
            return False
        if not self.reset_token_expires_at:
            return False
        return self.reset_token_expires_at > datetime.utcnow()

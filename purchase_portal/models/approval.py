"""
Approval History Model
Append-only audit trail of approval actions on purchase requests
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from purchase_portal.config.database import Base


class ApprovalAction(str, enum.Enum):
    """Actions recorded in the approval history"""
    APPROVE = "approve"
    REJECT = "reject"
    RETURN = "return"
    RESUBMIT = "resubmit"
    CANCEL = "cancel"


class ApprovalHistory(Base):
    """Approval history model"""
    __tablename__ = "approval_history"

    id = Column(Integer, primary_key=True, index=True)

    purchase_request_id = Column(
        Integer, ForeignKey("purchase_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    approver_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    action = Column(String(50), nullable=False)
    comments = Column(Text, nullable=True)
    # Level of the request at the time of the action
    approval_level = Column(Integer, nullable=False)

    action_date = Column(DateTime, default=datetime.utcnow)

    # Relationships
    purchase_request = relationship("PurchaseRequest", back_populates="approval_history")
    approver = relationship("User", foreign_keys=[approver_id])

    def __repr__(self):
        return f"<ApprovalHistory {self.action} L{self.approval_level}>"

    @property
    def approver_name(self):
        return self.approver.full_name if self.approver else None

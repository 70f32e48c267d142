"""
Purchase Request Models
Requisitions together with their line items and attachments
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from purchase_portal.config.database import Base


class RequestStatus(str, enum.Enum):
    """Purchase request status"""
    SUBMITTED = "submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED = "returned"
    CANCELLED = "cancelled"


# Statuses in which the requester may still edit the request and its line items
EDITABLE_STATUSES = {RequestStatus.SUBMITTED.value, RequestStatus.RETURNED.value}


class PurchaseRequest(Base):
    """Purchase request (requisition) model"""
    __tablename__ = "purchase_requests"

    id = Column(Integer, primary_key=True, index=True)
    requisition_number = Column(String(50), unique=True, index=True, nullable=False)

    # Request details
    title = Column(String(255), nullable=False)
    request_date = Column(DateTime, nullable=False)
    department = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False)
    business_justification_code = Column(String(50), nullable=False)
    business_justification_details = Column(Text, nullable=False)

    # Workflow
    status = Column(String(50), default=RequestStatus.SUBMITTED.value, nullable=False, index=True)
    current_approval_level = Column(Integer, default=1, nullable=False)
    total_estimated_cost = Column(Float, default=0.0, nullable=False)

    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    current_approver_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    requester = relationship("User", back_populates="purchase_requests", foreign_keys=[requester_id])
    current_approver = relationship("User", foreign_keys=[current_approver_id])
    line_items = relationship(
        "LineItem", back_populates="purchase_request", cascade="all, delete-orphan", order_by="LineItem.id"
    )
    attachments = relationship(
        "Attachment", back_populates="purchase_request", cascade="all, delete-orphan", order_by="Attachment.uploaded_at"
    )
    approval_history = relationship(
        "ApprovalHistory", back_populates="purchase_request", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<PurchaseRequest {self.requisition_number} - {self.status}>"

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES


class LineItem(Base):
    """Line item model"""
    __tablename__ = "line_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_request_id = Column(
        Integer, ForeignKey("purchase_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )

    item_name = Column(String(255), nullable=False)
    required_quantity = Column(Integer, nullable=False)
    unit_of_measure = Column(String(50), nullable=False)
    required_by_date = Column(DateTime, nullable=False)
    delivery_location = Column(String(255), nullable=False)
    unit_cost = Column(Float, nullable=False)
    item_justification = Column(Text, nullable=True)

    # Stock lookup
    stock_available = Column(Integer, default=0)
    stock_location = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    purchase_request = relationship("PurchaseRequest", back_populates="line_items")

    def __repr__(self):
        return f"<LineItem {self.item_name} x{self.required_quantity}>"

    @property
    def line_total(self) -> float:
        return self.required_quantity * self.unit_cost


class Attachment(Base):
    """Attachment model - immutable once uploaded"""
    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, index=True)
    purchase_request_id = Column(
        Integer, ForeignKey("purchase_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )

    file_name = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_path = Column(String(500), nullable=False)

    uploaded_at = Column(DateTime, default=datetime.utcnow)

    purchase_request = relationship("PurchaseRequest", back_populates="attachments")

    def __repr__(self):
        return f"<Attachment {self.original_name}>"

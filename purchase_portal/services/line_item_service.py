"""
Line Item Service
Line item mutations and the request cost rollup

Every mutation re-reads all items of the request and overwrites
total_estimated_cost inside the same transaction. The recompute is a
read-then-write without row locks, so two concurrent writers on the same
request can still lose one another's update.
"""

from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from purchase_portal.config.database import atomic
from purchase_portal.models.purchase_request import LineItem, PurchaseRequest
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()


class LineItemService:
    """Service for line items and the cost rollup"""

    def list_items(self, db: Session, purchase_request_id: int) -> List[LineItem]:
        return db.query(LineItem).filter(
            LineItem.purchase_request_id == purchase_request_id
        ).order_by(LineItem.id.asc()).all()

    def compute_total(self, db: Session, purchase_request_id: int) -> float:
        """Sum of quantity * unit cost over the items visible to this session"""
        items = self.list_items(db, purchase_request_id)
        return round(sum(item.required_quantity * item.unit_cost for item in items), 2)

    def apply_rollup(self, db: Session, request: PurchaseRequest) -> float:
        """
        Recompute and stage the request total

        Pending line item changes must already be flushed.
        """
        total = self.compute_total(db, request.id)
        request.total_estimated_cost = total
        return total

    def add_item(self, db: Session, request: PurchaseRequest, data) -> LineItem:
        with atomic(db):
            item = LineItem(purchase_request_id=request.id, **data.model_dump())
            db.add(item)
            db.flush()
            total = self.apply_rollup(db, request)
        db.refresh(item)

        logger.info(f"Line item {item.id} added to {request.requisition_number}; total now {total}")
        return item

    def update_item(self, db: Session, request: PurchaseRequest, item_id: int, data) -> LineItem:
        item = self._get_item(db, request, item_id)

        with atomic(db):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(item, field, value)
            db.flush()
            total = self.apply_rollup(db, request)
        db.refresh(item)

        logger.info(f"Line item {item.id} updated on {request.requisition_number}; total now {total}")
        return item

    def delete_item(self, db: Session, request: PurchaseRequest, item_id: int):
        item = self._get_item(db, request, item_id)

        with atomic(db):
            db.delete(item)
            db.flush()
            total = self.apply_rollup(db, request)

        logger.info(f"Line item {item_id} removed from {request.requisition_number}; total now {total}")

    def _get_item(self, db: Session, request: PurchaseRequest, item_id: int) -> LineItem:
        item = db.query(LineItem).filter(
            LineItem.id == item_id,
            LineItem.purchase_request_id == request.id
        ).first()

        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Line item not found"
            )
        return item


# Create singleton instance
line_item_service = LineItemService()

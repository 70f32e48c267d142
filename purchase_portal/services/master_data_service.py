"""
Master Data Service
Generic admin CRUD over the master tables

Each master type is registered once with its model, payload schemas and
delete behaviour; the admin routes dispatch on the type tag.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from purchase_portal.config.database import atomic
from purchase_portal.models.master_data import (
    ApprovalMatrix,
    Department,
    Entity,
    EscalationMatrix,
    Inventory,
    Location,
    Role,
    Vendor,
)
from purchase_portal.models.user import User
from purchase_portal.schemas import master_data as schemas
from purchase_portal.schemas.user import UserCreate, UserUpdate
from purchase_portal.services.auth_service import RequestContext
from purchase_portal.utils.helpers import model_to_dict
from purchase_portal.utils.logger import setup_logger, log_audit
from purchase_portal.utils.security import get_password_hash

logger = setup_logger()


@dataclass
class MasterDataHandler:
    """How one master type is stored, validated and deleted"""
    model: Any
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    soft_delete: bool = False
    exclude: Tuple[str, ...] = field(default_factory=tuple)

    def serialize(self, instance) -> Dict[str, Any]:
        data = model_to_dict(instance)
        for name in self.exclude:
            data.pop(name, None)
        return data

    def prepare(self, db: Session, values: Dict[str, Any], instance=None) -> Dict[str, Any]:
        """Hook for type-specific value handling before a write"""
        return values


class UserHandler(MasterDataHandler):
    """Users: hashed passwords, unique employee number/email, deactivate on delete"""

    def prepare(self, db: Session, values: Dict[str, Any], instance=None) -> Dict[str, Any]:
        values = dict(values)

        if values.get("role") is not None:
            values["role"] = getattr(values["role"], "value", values["role"])

        password = values.pop("password", None)
        if password:
            values["hashed_password"] = get_password_hash(password)

        for column, label in (("employee_number", "Employee number"), ("email", "Email")):
            if values.get(column) is None:
                continue
            query = db.query(User).filter(getattr(User, column) == values[column])
            if instance is not None:
                query = query.filter(User.id != instance.id)
            if query.first():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{label} already exists"
                )

        return values


MASTER_DATA_REGISTRY: Dict[str, MasterDataHandler] = {
    "users": UserHandler(
        User, UserCreate, UserUpdate, soft_delete=True,
        exclude=("hashed_password", "reset_token", "reset_token_expires_at"),
    ),
    "entities": MasterDataHandler(Entity, schemas.EntityCreate, schemas.EntityUpdate),
    "departments": MasterDataHandler(Department, schemas.DepartmentCreate, schemas.DepartmentUpdate),
    "locations": MasterDataHandler(Location, schemas.LocationCreate, schemas.LocationUpdate),
    "roles": MasterDataHandler(Role, schemas.RoleCreate, schemas.RoleUpdate),
    "approval-matrix": MasterDataHandler(ApprovalMatrix, schemas.ApprovalMatrixCreate, schemas.ApprovalMatrixUpdate),
    "escalation-matrix": MasterDataHandler(
        EscalationMatrix, schemas.EscalationMatrixCreate, schemas.EscalationMatrixUpdate
    ),
    "inventory": MasterDataHandler(Inventory, schemas.InventoryCreate, schemas.InventoryUpdate),
    "vendors": MasterDataHandler(Vendor, schemas.VendorCreate, schemas.VendorUpdate),
}


class MasterDataService:
    """Service for admin master data"""

    def get_handler(self, master_type: str) -> MasterDataHandler:
        handler = MASTER_DATA_REGISTRY.get(master_type)
        if handler is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown master type: {master_type}"
            )
        return handler

    def _validate(self, schema: Type[BaseModel], payload: Dict[str, Any], **dump_kwargs) -> Dict[str, Any]:
        try:
            return schema.model_validate(payload).model_dump(**dump_kwargs)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False, include_context=False))

    def _get_record(self, db: Session, handler: MasterDataHandler, record_id: int):
        record = db.query(handler.model).filter(handler.model.id == record_id).first()
        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Record not found"
            )
        return record

    def list_records(
        self,
        db: Session,
        master_type: str,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[int, List[Dict[str, Any]]]:
        handler = self.get_handler(master_type)
        query = db.query(handler.model)

        if active_only:
            query = query.filter(handler.model.is_active == True)  # noqa: E712

        total = query.count()
        records = query.order_by(handler.model.id.asc()).offset(skip).limit(limit).all()
        return total, [handler.serialize(record) for record in records]

    def create_record(self, db: Session, ctx: RequestContext, master_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        handler = self.get_handler(master_type)
        values = handler.prepare(db, self._validate(handler.create_schema, payload))
        record = handler.model(**values)

        try:
            with atomic(db):
                db.add(record)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A record with the same unique values already exists"
            )
        db.refresh(record)

        log_audit(ctx.user_id, f"create_{master_type}", f"id={record.id}")
        logger.info(f"Master data {master_type} #{record.id} created by user {ctx.user_id}")
        return handler.serialize(record)

    def update_record(
        self,
        db: Session,
        ctx: RequestContext,
        master_type: str,
        record_id: int,
        payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        handler = self.get_handler(master_type)
        record = self._get_record(db, handler, record_id)
        values = handler.prepare(db, self._validate(handler.update_schema, payload, exclude_unset=True), record)

        try:
            with atomic(db):
                for name, value in values.items():
                    setattr(record, name, value)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A record with the same unique values already exists"
            )
        db.refresh(record)

        log_audit(ctx.user_id, f"update_{master_type}", f"id={record_id} fields={sorted(values)}")
        return handler.serialize(record)

    def delete_record(self, db: Session, ctx: RequestContext, master_type: str, record_id: int) -> Optional[Dict[str, Any]]:
        """
        Delete a master record

        Returns:
            dict: The deactivated record for soft-deleted types, else None
        """
        handler = self.get_handler(master_type)
        record = self._get_record(db, handler, record_id)

        if handler.soft_delete:
            if master_type == "users" and record.id == ctx.user_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="You cannot deactivate your own account"
                )
            with atomic(db):
                record.is_active = False
            db.refresh(record)
            log_audit(ctx.user_id, f"deactivate_{master_type}", f"id={record_id}")
            return handler.serialize(record)

        try:
            with atomic(db):
                db.delete(record)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Record is still referenced and cannot be deleted"
            )

        log_audit(ctx.user_id, f"delete_{master_type}", f"id={record_id}")
        return None


# Create singleton instance
master_data_service = MasterDataService()

"""
Admin Routes
Master data management for administrators
"""

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from purchase_portal.config.database import get_db
from purchase_portal.services.auth_service import RequestContext, require_admin
from purchase_portal.services.master_data_service import master_data_service, MASTER_DATA_REGISTRY

router = APIRouter()


@router.get("/masters")
async def list_master_types(
    ctx: RequestContext = Depends(require_admin)
):
    """Master types that can be managed"""
    return {"success": True, "types": sorted(MASTER_DATA_REGISTRY)}


@router.get("/masters/{master_type}")
async def list_master_records(
    master_type: str,
    active_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    List records of one master type

    **Types:** users, entities, departments, locations, roles,
    approval-matrix, escalation-matrix, inventory, vendors
    """
    total, records = master_data_service.list_records(
        db, master_type, active_only=active_only, skip=skip, limit=limit
    )
    return {"success": True, "total": total, "records": records}


@router.post("/masters/{master_type}", status_code=status.HTTP_201_CREATED)
async def create_master_record(
    master_type: str,
    payload: Dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    record = master_data_service.create_record(db, ctx, master_type, payload)
    return {"success": True, "message": "Record created", "record": record}


@router.put("/masters/{master_type}/{record_id}")
async def update_master_record(
    master_type: str,
    record_id: int,
    payload: Dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    record = master_data_service.update_record(db, ctx, master_type, record_id, payload)
    return {"success": True, "message": "Record updated", "record": record}


@router.delete("/masters/{master_type}/{record_id}")
async def delete_master_record(
    master_type: str,
    record_id: int,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete a record; users are deactivated instead of removed"""
    record = master_data_service.delete_record(db, ctx, master_type, record_id)

    if record is not None:
        return {"success": True, "message": "Record deactivated", "record": record}
    return {"success": True, "message": "Record deleted"}

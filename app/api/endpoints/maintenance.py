# app/api/endpoints/maintenance.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_current_session, get_db_session, require_asset_custodian, session_user_uuid
from app.core.session import SessionUser
from app.models.enums import MaintenanceStatus
from app.schemas.maintenance import MaintenanceCreate, MaintenanceRead, MaintenanceUpdate, ReminderSweep
from app.services.activity_service import log_activity
from app.services.maintenance_service import (
    get_maintenance,
    list_maintenance,
    schedule_maintenance,
    send_reminders,
    update_maintenance,
)

router = APIRouter(prefix="/api/maintenance", tags=["Maintenance"])


@router.get("", response_model=List[MaintenanceRead])
async def get_maintenance_records(
    asset_id: Optional[UUID] = Query(None),
    status: Optional[MaintenanceStatus] = Query(None),
    upcoming: bool = Query(False),
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(get_current_session),
):
    return await list_maintenance(session, asset_id=asset_id, status=status, upcoming=upcoming)


@router.post("", response_model=MaintenanceRead, status_code=status.HTTP_201_CREATED)
async def create_maintenance_record(
    data: MaintenanceCreate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_custodian),
):
    user_id = session_user_uuid(current)
    record = await schedule_maintenance(session, data, user_id)

    await log_activity(
        action="CREATE",
        entity_type="Maintenance",
        entity_id=str(record.id),
        description=f"Scheduled {record.type.value.lower()} maintenance for asset {record.asset_id}",
        user_id=user_id,
        request=request,
    )
    return record


# -------------------------------------------------------------------
# REMINDER SWEEP (declared before /{record_id})
# -------------------------------------------------------------------
@router.get("/reminders", response_model=ReminderSweep)
async def check_reminders(
    days_ahead: int = Query(7, ge=0, le=365),
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(require_asset_custodian),
):
    return await send_reminders(session, days_ahead=days_ahead)


@router.get("/{record_id}", response_model=MaintenanceRead)
async def get_maintenance_record(
    record_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(get_current_session),
):
    return await get_maintenance(session, record_id)


@router.patch("/{record_id}", response_model=MaintenanceRead)
async def update_maintenance_record(
    record_id: UUID,
    data: MaintenanceUpdate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_custodian),
):
    record = await update_maintenance(session, record_id, data)

    await log_activity(
        action="UPDATE",
        entity_type="Maintenance",
        entity_id=str(record.id),
        description=f"Updated maintenance record ({record.status.value})",
        user_id=session_user_uuid(current),
        request=request,
    )
    return record

# app/api/endpoints/assets.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import (
    get_current_session,
    get_db_session,
    require_asset_editor,
    require_asset_registrar,
    require_permission,
    session_user_uuid,
)
from app.core.errors import NotFound
from app.core.permissions import Permission
from app.core.session import SessionUser
from app.models.enums import AssetStatus, AssetType
from app.schemas.asset import AssetCreate, AssetRead, AssetUpdate
from app.services.activity_service import log_activity
from app.services.asset_service import (
    approve_registration,
    archive_asset,
    get_asset,
    list_assets,
    register_asset,
    unarchive_asset,
    update_asset,
)
from app.services.auth_service import get_user_by_id

router = APIRouter(prefix="/api/assets", tags=["Assets"])


# -------------------------------------------------------------------
# LIST (scoped by role)
# -------------------------------------------------------------------
@router.get("", response_model=List[AssetRead])
async def get_assets(
    type: Optional[AssetType] = Query(None),
    status: Optional[AssetStatus] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await list_assets(session, current.role, session_user_uuid(current), type=type, status=status)


# -------------------------------------------------------------------
# REGISTER
# -------------------------------------------------------------------
@router.post("", response_model=AssetRead, status_code=status.HTTP_201_CREATED)
async def create_asset(
    data: AssetCreate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_registrar),
):
    registrar = await get_user_by_id(session, session_user_uuid(current))
    if not registrar:
        raise NotFound("User not found")

    asset = await register_asset(session, data, registrar)

    await log_activity(
        action="CREATE",
        entity_type="Asset",
        entity_id=str(asset.id),
        description=f'Registered asset "{asset.name}" ({asset.asset_code})',
        details={"status": asset.status.value, "quantity": asset.quantity},
        user_id=registrar.id,
        request=request,
    )
    return asset


# -------------------------------------------------------------------
# DETAIL
# -------------------------------------------------------------------
@router.get("/{asset_id}", response_model=AssetRead)
async def get_asset_detail(
    asset_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(get_current_session),
):
    return await get_asset(session, asset_id)


# -------------------------------------------------------------------
# APPROVE A PENDING REGISTRATION
# -------------------------------------------------------------------
@router.post("/{asset_id}/approve", response_model=AssetRead)
async def approve_asset(
    asset_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_permission(Permission.APPROVE_ASSET_REGISTRATIONS)),
):
    asset = await approve_registration(session, asset_id)

    await log_activity(
        action="APPROVE",
        entity_type="Asset",
        entity_id=str(asset.id),
        description=f'Approved registration of "{asset.name}" ({asset.asset_code})',
        user_id=session_user_uuid(current),
        request=request,
    )
    return asset


# -------------------------------------------------------------------
# UPDATE DESCRIPTIVE FIELDS
# -------------------------------------------------------------------
@router.patch("/{asset_id}", response_model=AssetRead)
async def edit_asset(
    asset_id: UUID,
    data: AssetUpdate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_editor),
):
    asset = await update_asset(session, asset_id, data)

    await log_activity(
        action="UPDATE",
        entity_type="Asset",
        entity_id=str(asset.id),
        description=f'Updated asset "{asset.name}" ({asset.asset_code})',
        details={"fields": sorted(data.model_dump(exclude_unset=True))},
        user_id=session_user_uuid(current),
        request=request,
    )
    return asset


# -------------------------------------------------------------------
# ARCHIVE / RESTORE
# -------------------------------------------------------------------
@router.post("/{asset_id}/archive", response_model=AssetRead)
async def archive(
    asset_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_editor),
):
    asset = await archive_asset(session, asset_id)

    await log_activity(
        action="ARCHIVE",
        entity_type="Asset",
        entity_id=str(asset.id),
        description=f'Archived asset "{asset.name}" ({asset.asset_code})',
        user_id=session_user_uuid(current),
        request=request,
    )
    return asset


@router.delete("/{asset_id}/archive", response_model=AssetRead)
async def unarchive(
    asset_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_asset_editor),
):
    asset = await unarchive_asset(session, asset_id)

    await log_activity(
        action="RESTORE",
        entity_type="Asset",
        entity_id=str(asset.id),
        description=f'Restored asset "{asset.name}" ({asset.asset_code})',
        user_id=session_user_uuid(current),
        request=request,
    )
    return asset

# app/services/asset_service.py

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidOperation, NotFound
from app.models.asset import Asset
from app.models.enums import AssetStatus, AssetType, NotificationType
from app.models.user import User, UserRole
from app.schemas.asset import AssetCreate, AssetUpdate
from app.services.notification_service import queue_for_roles

# What a course rep may browse
COURSE_REP_TYPES = (AssetType.CONSUMABLE, AssetType.TEACHING_AID)

def shelf_status(asset: Asset) -> AssetStatus:
    """Where an asset sits once nothing else holds it back."""
    fully_allocated = asset.allocated_quantity and asset.available_quantity <= 0
    return AssetStatus.ALLOCATED if fully_allocated else AssetStatus.AVAILABLE


# Pending registrations and transfers must settle before an asset is shelved
ARCHIVABLE_STATUSES = (AssetStatus.AVAILABLE, AssetStatus.ALLOCATED, AssetStatus.MAINTENANCE)


async def get_asset(session: AsyncSession, asset_id: UUID) -> Asset:
    asset = await session.get(Asset, asset_id)
    if not asset:
        raise NotFound("Asset not found")
    return asset


async def get_asset_by_code(session: AsyncSession, asset_code: str) -> Asset | None:
    result = await session.execute(select(Asset).where(Asset.asset_code == asset_code))
    return result.scalar_one_or_none()


# ============================================================================
# LIST (role-scoped)
# ============================================================================
async def list_assets(
    session: AsyncSession,
    role: UserRole,
    user_id: UUID,
    type: Optional[AssetType] = None,
    status: Optional[AssetStatus] = None,
) -> List[Asset]:
    query = select(Asset).order_by(Asset.created_at.desc())

    if role == UserRole.COURSE_REP:
        # Course reps only ever see what is on the shelf
        if type and type not in COURSE_REP_TYPES:
            return []
        types = [type] if type else list(COURSE_REP_TYPES)
        query = query.where(Asset.status == AssetStatus.AVAILABLE, Asset.type.in_(types))
        result = await session.execute(query)
        return list(result.scalars().all())

    if type:
        query = query.where(Asset.type == type)
    if status:
        query = query.where(Asset.status == status)

    lecturer_allocations = role == UserRole.LECTURER and status == AssetStatus.ALLOCATED
    if lecturer_allocations:
        query = query.where(Asset.allocated_to == user_id, Asset.allocated_quantity >= 1)

    result = await session.execute(query)
    return list(result.scalars().all())


# ============================================================================
# REGISTER
# ============================================================================
async def register_asset(session: AsyncSession, data: AssetCreate, registrar: User) -> Asset:
    if await get_asset_by_code(session, data.asset_code):
        raise InvalidOperation("Asset code already exists")

    quantity = data.quantity if data.quantity is not None else 1
    allocated_quantity = quantity if data.allocated_to else 0

    # Officer registrations wait for a faculty admin
    requires_approval = registrar.role == UserRole.DEPARTMENTAL_OFFICER
    if requires_approval:
        status = AssetStatus.PENDING_APPROVAL
    else:
        status = AssetStatus.ALLOCATED if data.allocated_to else AssetStatus.AVAILABLE

    asset = Asset(
        **data.model_dump(exclude={"quantity", "unit"}),
        quantity=quantity,
        allocated_quantity=allocated_quantity,
        unit=data.unit or ("units" if data.type == AssetType.CONSUMABLE else "pieces"),
        registered_by=registrar.id,
        status=status,
    )
    session.add(asset)
    await session.flush()

    if requires_approval:
        await queue_for_roles(
            session,
            [UserRole.FACULTY_ADMIN],
            NotificationType.ASSET_PENDING_APPROVAL,
            "Asset Registration Pending Approval",
            f'{registrar.name} registered a new asset "{asset.name}" ({asset.asset_code}). '
            "Requires faculty approval.",
            related_asset_id=asset.id,
        )

    await session.commit()
    await session.refresh(asset)
    return asset


# ============================================================================
# APPROVE A PENDING REGISTRATION
# ============================================================================
async def approve_registration(session: AsyncSession, asset_id: UUID) -> Asset:
    asset = await get_asset(session, asset_id)
    if asset.status != AssetStatus.PENDING_APPROVAL:
        raise InvalidOperation("Asset is not pending approval")

    asset.status = AssetStatus.ALLOCATED if asset.allocated_to else AssetStatus.AVAILABLE
    asset.updated_at = datetime.now(timezone.utc)
    session.add(asset)
    await session.commit()
    await session.refresh(asset)
    return asset


# ============================================================================
# UPDATE
# ============================================================================
async def update_asset(session: AsyncSession, asset_id: UUID, data: AssetUpdate) -> Asset:
    asset = await get_asset(session, asset_id)
    changes = data.model_dump(exclude_unset=True)

    new_code = changes.get("asset_code")
    if new_code and new_code != asset.asset_code and await get_asset_by_code(session, new_code):
        raise InvalidOperation("Asset code already exists")

    quantity = changes.get("quantity")
    if quantity is not None and quantity < (asset.allocated_quantity or 0):
        raise InvalidOperation(
            f"Quantity cannot be below the {asset.allocated_quantity} unit(s) already allocated"
        )

    for field, value in changes.items():
        setattr(asset, field, value)
    asset.updated_at = datetime.now(timezone.utc)

    session.add(asset)
    await session.commit()
    await session.refresh(asset)
    return asset


# ============================================================================
# ARCHIVE (retire) / RESTORE
# ============================================================================
async def archive_asset(session: AsyncSession, asset_id: UUID) -> Asset:
    asset = await get_asset(session, asset_id)
    if asset.status == AssetStatus.RETIRED:
        raise InvalidOperation("Asset is already archived")
    if asset.status not in ARCHIVABLE_STATUSES:
        raise InvalidOperation(f"Asset cannot be archived while {asset.status.value}")

    now = datetime.now(timezone.utc)
    asset.status = AssetStatus.RETIRED
    asset.archived_at = now
    asset.updated_at = now

    session.add(asset)
    await session.commit()
    await session.refresh(asset)
    return asset


async def unarchive_asset(session: AsyncSession, asset_id: UUID) -> Asset:
    asset = await get_asset(session, asset_id)
    if asset.status != AssetStatus.RETIRED:
        raise InvalidOperation("Asset is not archived")

    asset.status = shelf_status(asset)
    asset.archived_at = None
    asset.updated_at = datetime.now(timezone.utc)

    session.add(asset)
    await session.commit()
    await session.refresh(asset)
    return asset

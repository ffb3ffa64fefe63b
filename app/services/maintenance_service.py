# app/services/maintenance_service.py

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidOperation, NotFound
from app.models.asset import Asset
from app.models.enums import AssetStatus, MaintenanceStatus, MaintenanceType, NotificationType
from app.models.maintenance import MaintenanceRecord
from app.models.user import UserRole
from app.schemas.maintenance import MaintenanceCreate, MaintenanceUpdate, ReminderItem, ReminderSweep
from app.services.asset_service import get_asset, shelf_status
from app.services.auth_service import list_users_with_roles
from app.services.notification_service import queue_notification

OPEN_STATUSES = (MaintenanceStatus.SCHEDULED, MaintenanceStatus.IN_PROGRESS)
CLOSED_STATUSES = (MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED)
REMINDER_RECIPIENTS = (UserRole.DEPARTMENTAL_OFFICER, UserRole.FACULTY_ADMIN)

# Only assets sitting on the shelf or with a holder can be taken out for service
SERVICEABLE_STATUSES = (AssetStatus.AVAILABLE, AssetStatus.ALLOCATED)


async def get_maintenance(session: AsyncSession, record_id: UUID) -> MaintenanceRecord:
    record = await session.get(MaintenanceRecord, record_id)
    if not record:
        raise NotFound("Maintenance record not found")
    return record


async def list_maintenance(
    session: AsyncSession,
    asset_id: Optional[UUID] = None,
    status: Optional[MaintenanceStatus] = None,
    upcoming: bool = False,
) -> List[MaintenanceRecord]:
    query = select(MaintenanceRecord).order_by(MaintenanceRecord.scheduled_date)

    if asset_id:
        query = query.where(MaintenanceRecord.asset_id == asset_id)
    if status:
        query = query.where(MaintenanceRecord.status == status)
    if upcoming:
        query = query.where(MaintenanceRecord.scheduled_date >= datetime.now(timezone.utc))

    result = await session.execute(query)
    return list(result.scalars().all())


def _take_out_of_service(asset: Asset) -> None:
    if asset.status in SERVICEABLE_STATUSES:
        asset.status = AssetStatus.MAINTENANCE
        asset.updated_at = datetime.now(timezone.utc)


# ============================================================================
# SCHEDULE
# ============================================================================
async def schedule_maintenance(
    session: AsyncSession,
    data: MaintenanceCreate,
    created_by: UUID,
) -> MaintenanceRecord:
    asset = await get_asset(session, data.asset_id)
    if asset.status == AssetStatus.RETIRED:
        raise InvalidOperation("Archived assets cannot be scheduled for maintenance")

    record = MaintenanceRecord(
        **data.model_dump(),
        status=MaintenanceStatus.SCHEDULED,
        created_by=created_by,
    )
    session.add(record)

    # A booked repair takes the asset off the shelf straight away
    if data.type == MaintenanceType.REPAIR and data.scheduled_date:
        _take_out_of_service(asset)
        session.add(asset)

    await session.commit()
    await session.refresh(record)
    return record


# ============================================================================
# UPDATE (status changes move the asset in and out of service)
# ============================================================================
async def _other_open_records(session: AsyncSession, record: MaintenanceRecord) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(MaintenanceRecord)
        .where(
            MaintenanceRecord.asset_id == record.asset_id,
            MaintenanceRecord.status.in_(OPEN_STATUSES),
            MaintenanceRecord.id != record.id,
        )
    )
    return result.scalar_one()


async def update_maintenance(
    session: AsyncSession,
    record_id: UUID,
    data: MaintenanceUpdate,
) -> MaintenanceRecord:
    record = await get_maintenance(session, record_id)
    asset = await get_asset(session, record.asset_id)
    changes = data.model_dump(exclude_unset=True)

    for field, value in changes.items():
        setattr(record, field, value)

    new_status = changes.get("status")
    if new_status == MaintenanceStatus.COMPLETED and not record.completed_date:
        record.completed_date = datetime.now(timezone.utc)

    if new_status in CLOSED_STATUSES:
        if asset.status == AssetStatus.MAINTENANCE and not await _other_open_records(session, record):
            asset.status = shelf_status(asset)
            asset.updated_at = datetime.now(timezone.utc)
    elif new_status in OPEN_STATUSES:
        _take_out_of_service(asset)

    session.add(asset)
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


# ============================================================================
# REMINDERS
# ============================================================================
async def send_reminders(session: AsyncSession, days_ahead: int = 7) -> ReminderSweep:
    """
    Notifies officers and admins once about every open record that falls
    due within the window.
    """
    now = datetime.now(timezone.utc)
    result = await session.execute(
        select(MaintenanceRecord, Asset)
        .join(Asset, Asset.id == MaintenanceRecord.asset_id)
        .where(
            MaintenanceRecord.status.in_(OPEN_STATUSES),
            MaintenanceRecord.scheduled_date >= now,
            MaintenanceRecord.scheduled_date <= now + timedelta(days=days_ahead),
            MaintenanceRecord.reminder_sent == False,  # noqa: E712
        )
        .order_by(MaintenanceRecord.scheduled_date)
    )
    due = result.all()
    recipients = await list_users_with_roles(session, list(REMINDER_RECIPIENTS))

    reminders = []
    for record, asset in due:
        for user in recipients:
            queue_notification(
                session,
                user.id,
                NotificationType.MAINTENANCE_DUE,
                "Upcoming Maintenance",
                f"{asset.name} has scheduled {record.type.value.lower()} maintenance on "
                f"{record.scheduled_date.date().isoformat()}",
                related_asset_id=asset.id,
            )
        record.reminder_sent = True
        session.add(record)
        reminders.append(ReminderItem(
            id=record.id,
            asset_id=asset.id,
            asset_name=asset.name,
            type=record.type,
            scheduled_date=record.scheduled_date,
        ))

    await session.commit()
    return ReminderSweep(
        upcoming_maintenance=len(reminders),
        notified_users=len(recipients) if reminders else 0,
        reminders=reminders,
    )

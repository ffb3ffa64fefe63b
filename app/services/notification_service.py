# app/services/notification_service.py

from uuid import UUID
from typing import Iterable, List, Optional

from sqlmodel import select
from sqlalchemy import update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import NotificationType
from app.models.notification import Notification
from app.models.user import UserRole
from app.services.auth_service import list_users_with_roles

MAX_LISTED = 50


def queue_notification(
    session: AsyncSession,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    related_asset_id: Optional[UUID] = None,
    related_request_id: Optional[UUID] = None,
) -> Notification:
    """
    Adds a notification to the caller's unit of work; the caller commits.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_asset_id=related_asset_id,
        related_request_id=related_request_id,
    )
    session.add(notification)
    return notification


async def queue_for_roles(
    session: AsyncSession,
    roles: Iterable[UserRole],
    type: NotificationType,
    title: str,
    message: str,
    related_asset_id: Optional[UUID] = None,
) -> int:
    recipients = await list_users_with_roles(session, list(roles))
    for user in recipients:
        queue_notification(session, user.id, type, title, message, related_asset_id=related_asset_id)
    return len(recipients)


async def list_notifications(session: AsyncSession, user_id: UUID, unread_only: bool = False) -> List[Notification]:
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.read == False)  # noqa: E712
    query = query.order_by(Notification.created_at.desc()).limit(MAX_LISTED)

    result = await session.execute(query)
    return list(result.scalars().all())


async def mark_read(
    session: AsyncSession,
    user_id: UUID,
    notification_ids: Optional[List[UUID]] = None,
    mark_all: bool = False,
) -> None:
    # Always scoped to the owner; foreign ids are silently ignored
    stmt = update(Notification).where(Notification.user_id == user_id)

    if mark_all:
        stmt = stmt.where(Notification.read == False)  # noqa: E712
    elif notification_ids:
        stmt = stmt.where(Notification.id.in_(notification_ids))
    else:
        return

    await session.execute(stmt.values(read=True))
    await session.commit()


async def count_unread(session: AsyncSession, user_id: UUID) -> int:
    result = await session.execute(
        select(func.count()).select_from(Notification).where(
            (Notification.user_id == user_id) & (Notification.read == False)  # noqa: E712
        )
    )
    return result.scalar_one()

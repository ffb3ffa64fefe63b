# app/api/endpoints/notifications.py

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_current_session, get_db_session, session_user_uuid
from app.core.session import SessionUser
from app.schemas.notification import MarkReadRequest, NotificationRead
from app.services.notification_service import count_unread, list_notifications, mark_read

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationRead])
async def get_notifications(
    unread_only: bool = Query(False),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await list_notifications(session, session_user_uuid(current), unread_only=unread_only)


@router.patch("")
async def mark_notifications_read(
    data: MarkReadRequest,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    await mark_read(
        session,
        session_user_uuid(current),
        notification_ids=data.notification_ids,
        mark_all=data.mark_all_as_read,
    )
    return {"success": True}


@router.get("/count")
async def unread_count(
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return {"count": await count_unread(session, session_user_uuid(current))}

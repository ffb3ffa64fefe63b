# app/api/endpoints/activity_logs.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_db_session, require_permission, session_user_uuid
from app.core.permissions import Permission
from app.core.rbac import has_any_permission
from app.core.session import SessionUser
from app.schemas.activity import ActivityLogRead
from app.services.activity_service import query_activity

router = APIRouter(prefix="/api/activity-logs", tags=["Activity Logs"])

require_log_reader = require_permission(
    Permission.VIEW_OWN_ACTIVITY_HISTORY,
    Permission.VIEW_DEPARTMENTAL_LOGS,
    Permission.VIEW_ALL_SYSTEM_LOGS,
    any_of=True,
)


@router.get("", response_model=List[ActivityLogRead])
async def get_activity_logs(
    user_id: Optional[UUID] = Query(None),
    entity_type: Optional[str] = Query(None),
    entity_id: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_log_reader),
):
    # Without a wider scope the caller only ever sees their own history
    wide_scope = has_any_permission(
        current.role,
        [Permission.VIEW_DEPARTMENTAL_LOGS, Permission.VIEW_ALL_SYSTEM_LOGS],
    )
    if not wide_scope:
        user_id = session_user_uuid(current)

    return await query_activity(
        session,
        user_id=user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )

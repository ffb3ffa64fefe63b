# app/api/endpoints/system_config.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import forbidden, get_current_session, get_db_session, require_permission, session_user_uuid
from app.core.errors import InvalidOperation
from app.core.permissions import Permission
from app.core.rbac import has_permission
from app.core.session import SessionUser
from app.schemas.system_config import DEPARTMENTAL_CATEGORY, ConfigCheck, SystemConfigRead, SystemConfigWrite
from app.services.activity_service import log_activity
from app.services.config_service import (
    get_config,
    get_config_bool,
    get_config_number,
    get_config_record,
    list_configs,
    upsert_config,
)

router = APIRouter(prefix="/api/system-config", tags=["System Config"])

require_configurer = require_permission(
    Permission.CONFIGURE_GLOBAL_PARAMETERS,
    Permission.CONFIGURE_DEPARTMENTAL_DATA,
    any_of=True,
)


def _departmental_only(current: SessionUser) -> bool:
    return not has_permission(current.role, Permission.CONFIGURE_GLOBAL_PARAMETERS)


@router.get("", response_model=List[SystemConfigRead])
async def get_system_config(
    category: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_configurer),
):
    if _departmental_only(current):
        if category and category != DEPARTMENTAL_CATEGORY:
            raise forbidden()
        category = DEPARTMENTAL_CATEGORY

    return await list_configs(session, category=category)


@router.post("", response_model=SystemConfigRead)
async def save_system_config(
    data: SystemConfigWrite,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_configurer),
):
    if _departmental_only(current):
        existing = await get_config_record(session, data.key)
        if data.category != DEPARTMENTAL_CATEGORY or (existing and existing.category != DEPARTMENTAL_CATEGORY):
            raise forbidden()

    user_id = session_user_uuid(current)
    record = await upsert_config(session, data, user_id)

    await log_activity(
        action="UPDATE",
        entity_type="SystemConfig",
        entity_id=record.key,
        description=f"Set {record.key}",
        details={"value": record.value, "category": record.category},
        user_id=user_id,
        request=request,
    )
    return record


# -------------------------------------------------------------------
# TYPED LOOKUP (any signed-in user; feature flags drive the UI)
# -------------------------------------------------------------------
@router.get("/check", response_model=ConfigCheck)
async def check_system_config(
    key: Optional[str] = Query(None),
    type: str = Query("string"),
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(get_current_session),
):
    if not key:
        raise InvalidOperation("Key parameter is required")

    if type == "boolean":
        value = await get_config_bool(session, key, False)
    elif type == "number":
        value = await get_config_number(session, key, 0)
    else:
        type = "string"
        value = await get_config(session, key)

    return ConfigCheck(key=key, value=value, type=type)

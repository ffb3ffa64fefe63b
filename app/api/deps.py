# app/api/deps.py

import uuid
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.permissions import Permission
from app.core.rbac import has_all_permissions, has_any_permission
from app.core.session import SessionUser, resolve_session


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Current session (401 when absent)
# ------------------------------------------------------------
async def get_current_session(request: Request) -> SessionUser:
    session = await resolve_session(request)
    if session is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return session


def session_user_uuid(session: SessionUser) -> uuid.UUID:
    try:
        return uuid.UUID(session.user_id)
    except ValueError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


def forbidden() -> HTTPException:
    return HTTPException(status.HTTP_403_FORBIDDEN, "Forbidden")


# ------------------------------------------------------------
# Permission-based access control
# ------------------------------------------------------------
def require_permission(*permissions: Permission, any_of: bool = False):
    """
    Dependency factory: the session's role must hold every listed
    permission (or at least one of them with any_of=True).
    """
    check = has_any_permission if any_of else has_all_permissions

    async def checker(session: SessionUser = Depends(get_current_session)) -> SessionUser:
        if not check(session.role, permissions):
            logger.info(
                "Permission denied: role={} needs {} of {}",
                session.role.value, "any" if any_of else "all", [p.value for p in permissions],
            )
            raise forbidden()
        return session

    return checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_user_admin = require_permission(Permission.MANAGE_USERS)
require_asset_registrar = require_permission(Permission.REGISTER_ASSETS)
require_request_approver = require_permission(Permission.APPROVE_REQUESTS)

# Officers who register assets and admins who approve them both curate the register
require_asset_editor = require_permission(
    Permission.REGISTER_ASSETS,
    Permission.APPROVE_ASSET_REGISTRATIONS,
    any_of=True,
)

# Both hold the whole asset register in view
require_asset_custodian = require_permission(Permission.VIEW_ALL_ASSETS)

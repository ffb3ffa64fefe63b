# app/core/session.py

from dataclasses import dataclass
from typing import Optional

import jwt
from loguru import logger
from starlette.requests import HTTPConnection

from app.core.config import settings
from app.core.security import decode_token
from app.models.user import UserRole


@dataclass(frozen=True)
class SessionUser:
    """Authenticated identity for one request. Never stored by the app."""
    user_id: str
    role: UserRole


def _extract_token(request: HTTPConnection) -> Optional[str]:
    """
    Bearer header first (API clients), then the session cookie (browsers).
    """
    auth_header = request.headers.get("Authorization")
    if auth_header:
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()

    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


async def resolve_session(request: HTTPConnection) -> Optional[SessionUser]:
    token = _extract_token(request)
    if not token:
        return None

    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        logger.debug("Expired session token on {}", request.url.path)
        return None
    except jwt.InvalidTokenError:
        logger.debug("Invalid session token on {}", request.url.path)
        return None

    user_id = payload.get("sub")
    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        return None

    if not user_id:
        return None

    return SessionUser(user_id=str(user_id), role=role)

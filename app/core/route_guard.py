"""
Route guard
===========
Coarse, path-based access control applied before any handler runs.

Only paths under GUARDED_PREFIXES are inspected; everything else (static
uploads, the sign-in page, docs, health checks) is served without a session.
Fine-grained checks stay in the handlers via app.core.rbac.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from app.core.session import SessionUser, resolve_session
from app.models.user import UserRole

SIGN_IN_PATH = "/auth/signin"
DASHBOARD_PATH = "/dashboard"
AUTH_API_PREFIX = "/api/auth"

GUARDED_PREFIXES: Tuple[str, ...] = (
    "/dashboard",
    "/admin",
    "/officer",
    "/lecturer",
    "/course-rep",
    "/api",
)


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    allowed_roles: FrozenSet[UserRole]

    def allows(self, role: UserRole) -> bool:
        # Faculty admins may enter every protected area
        return role == UserRole.FACULTY_ADMIN or role in self.allowed_roles


# Checked in order; the first failing rule decides.
ROUTE_POLICY: Tuple[RouteRule, ...] = (
    RouteRule("/admin", frozenset({UserRole.FACULTY_ADMIN})),
    RouteRule("/officer", frozenset({UserRole.DEPARTMENTAL_OFFICER})),
    RouteRule("/lecturer", frozenset({UserRole.LECTURER})),
    RouteRule("/course-rep", frozenset({UserRole.COURSE_REP})),
)


class GuardAction(str, Enum):
    PASS = "pass"
    SIGN_IN = "sign_in"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    redirect_to: Optional[str] = None


ALLOW = GuardDecision(GuardAction.PASS)
TO_SIGN_IN = GuardDecision(GuardAction.SIGN_IN, SIGN_IN_PATH)
TO_DASHBOARD = GuardDecision(GuardAction.DASHBOARD, DASHBOARD_PATH)


def path_matches(path: str, prefix: str) -> bool:
    """Prefix match on whole path segments: /admin matches /admin and /admin/x, not /administrator."""
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def is_guarded(path: str) -> bool:
    return any(path_matches(path, prefix) for prefix in GUARDED_PREFIXES)


def evaluate_route(session: Optional[SessionUser], path: str) -> GuardDecision:
    if path_matches(path, AUTH_API_PREFIX):
        return ALLOW

    if session is None:
        return TO_SIGN_IN

    for rule in ROUTE_POLICY:
        if path_matches(path, rule.prefix) and not rule.allows(session.role):
            return TO_DASHBOARD

    return ALLOW


class RouteGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        path = request.url.path
        if not is_guarded(path):
            return await call_next(request)

        session = None
        if not path_matches(path, AUTH_API_PREFIX):
            session = await resolve_session(request)

        decision = evaluate_route(session, path)
        if decision.action is GuardAction.PASS:
            return await call_next(request)

        logger.debug(
            "Route guard redirect {} -> {} (role={})",
            path, decision.redirect_to, session.role.value if session else None,
        )
        target = request.url.replace(path=decision.redirect_to, query="")
        return RedirectResponse(url=str(target), status_code=307)

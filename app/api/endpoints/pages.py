# app/api/endpoints/pages.py

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_current_session, get_db_session, session_user_uuid
from app.core.permissions import DASHBOARD_PATHS
from app.core.route_guard import SIGN_IN_PATH
from app.core.session import SessionUser
from app.services import dashboard_service

# Page-level routes. Everything except the sign-in page sits behind the route
# guard, which has already checked the role against the path prefix.
router = APIRouter(tags=["Pages"])


@router.get(SIGN_IN_PATH)
async def signin_page():
    return {
        "page": "signin",
        "message": "Sign in with POST /api/auth/login using your email and password.",
        "login_url": "/api/auth/login",
    }


@router.get("/dashboard")
async def dashboard(current: SessionUser = Depends(get_current_session)):
    return RedirectResponse(DASHBOARD_PATHS[current.role], status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/admin/dashboard")
async def admin_dashboard(
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return {
        "page": "admin-dashboard",
        "role": current.role,
        "stats": await dashboard_service.admin_summary(session),
    }


@router.get("/officer/dashboard")
async def officer_dashboard(
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return {
        "page": "officer-dashboard",
        "role": current.role,
        "stats": await dashboard_service.officer_summary(session),
    }


@router.get("/lecturer/dashboard")
async def lecturer_dashboard(
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return {
        "page": "lecturer-dashboard",
        "role": current.role,
        "stats": await dashboard_service.lecturer_summary(session, session_user_uuid(current)),
    }


@router.get("/course-rep/dashboard")
async def course_rep_dashboard(
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return {
        "page": "course-rep-dashboard",
        "role": current.role,
        "stats": await dashboard_service.course_rep_summary(session),
    }

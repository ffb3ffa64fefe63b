# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_current_session, get_db_session
from app.core.config import settings
from app.core.permissions import DASHBOARD_PATHS
from app.core.rate_limiter import limiter
from app.core.rbac import permissions_for
from app.core.session import SessionUser
from app.schemas.auth import LoginRequest, SessionRead, TokenWithUser
from app.services.activity_service import log_activity
from app.services.auth_service import authenticate_user, create_login_response

# Not behind the route guard: reachable without a session
router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN (email + password, sets the session cookie)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        logger.info(f"Failed login for {payload.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    login_response = create_login_response(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=login_response.access_token,
        max_age=login_response.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    await log_activity(
        action="LOGIN",
        entity_type="User",
        entity_id=str(user.id),
        description=f"{user.name} signed in",
        user_id=user.id,
        request=request,
    )
    return login_response


# -------------------------------------------------------------------
# CURRENT SESSION
# -------------------------------------------------------------------
@router.get("/session", response_model=SessionRead)
async def current_session(session: SessionUser = Depends(get_current_session)):
    return SessionRead(
        user_id=session.user_id,
        role=session.role,
        permissions=sorted(permissions_for(session.role), key=lambda p: p.value),
        dashboard=DASHBOARD_PATHS[session.role],
    )


# -------------------------------------------------------------------
# SIGN OUT
# -------------------------------------------------------------------
@router.post("/signout")
async def signout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Signed out"}

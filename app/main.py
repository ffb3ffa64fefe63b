# app/main.py

import sys
import time
from pathlib import Path

import psutil
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.deps import get_current_session
from app.core.config import settings
from app.core.database import AsyncSessionLocal, init_db, test_connection
from app.core.errors import register_error_handlers
from app.core.rate_limiter import limiter
from app.core.route_guard import RouteGuardMiddleware
from app.core.session import SessionUser
from app.core.storage import PUBLIC_PREFIX
from app.models.user import UserRole
from app.services.auth_service import create_user, get_user_by_email

# Routers
from app.api.endpoints import (
    activity_logs as activity_logs_router,
    assets as assets_router,
    auth as auth_router,
    maintenance as maintenance_router,
    notifications as notifications_router,
    pages as pages_router,
    reports as reports_router,
    requests as requests_router,
    system_config as system_config_router,
    transfers as transfers_router,
    upload as upload_router,
    users as users_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    level=settings.LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=not settings.is_production,
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Faculty Asset Registry",
    version="1.0.0",
    description="Asset registration, requests and transfers for a university faculty.",
)

START_TIME = time.time()

# ------------------------------------------------------------
# ERRORS & RATE LIMITING
# ------------------------------------------------------------
register_error_handlers(app)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ------------------------------------------------------------
# MIDDLEWARE (last added runs first: CORS wraps the guard)
# ------------------------------------------------------------
app.add_middleware(RouteGuardMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ------------------------------------------------------------
# UPLOADED DOCUMENTS (local storage backend)
# ------------------------------------------------------------
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(assets_router.router)
app.include_router(upload_router.router)
app.include_router(requests_router.router)
app.include_router(transfers_router.router)
app.include_router(maintenance_router.router)
app.include_router(reports_router.router)
app.include_router(notifications_router.router)
app.include_router(activity_logs_router.router)
app.include_router(system_config_router.router)
app.include_router(pages_router.router)


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics(_: SessionUser = Depends(get_current_session)):
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage("/").percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    try:
        await test_connection()
        db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception as e:
        logger.error(f"Metrics DB ping failed: {e}")
        db_status = "Error"
        db_latency = 0

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": db_status,
        "db_latency": db_latency,
    }


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
async def seed_faculty_admin() -> None:
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        logger.warning("Missing Super Admin credentials in settings. Skipping seeding.")
        return

    async with AsyncSessionLocal() as session:
        existing = await get_user_by_email(session, settings.SUPER_ADMIN_EMAIL)
        if existing:
            logger.info("Faculty admin already exists. Skipping.")
            return

        logger.info(f"Seeding faculty admin: {settings.SUPER_ADMIN_EMAIL}")
        await create_user(
            session=session,
            name=settings.SUPER_ADMIN_NAME or "Faculty Admin",
            email=settings.SUPER_ADMIN_EMAIL,
            password=settings.SUPER_ADMIN_PASSWORD,
            role=UserRole.FACULTY_ADMIN,
        )
        logger.success("Faculty admin created successfully.")


@app.on_event("startup")
async def on_startup():
    logger.info("Starting Faculty Asset Registry...")

    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Startup aborted: Database connection failed.")
        return

    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    try:
        await seed_faculty_admin()
    except Exception:
        logger.exception("Faculty admin seeding failed.")

    logger.success("Backend startup completed successfully.")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "Faculty Asset Registry",
        "version": app.version,
        "signin_url": "/auth/signin",
    }

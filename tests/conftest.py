import os
import tempfile

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Settings are read when app.core.config is first imported, so the
# environment must be in place before app.main is loaded.
# ------------------------------------------------------------------
_TMP_DIR = tempfile.mkdtemp(prefix="asset-registry-tests-")

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ.pop("REDIS_URL", None)
os.environ.pop("SUPER_ADMIN_EMAIL", None)

from app.main import app  # noqa: E402
from app.core.database import AsyncSessionLocal, drop_db, init_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.models.user import UserRole  # noqa: E402
from app.services.auth_service import create_user  # noqa: E402

DEFAULT_PASSWORD = "password123"


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    """Every test starts from empty tables."""
    await drop_db()
    await init_db()
    yield


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


def token_for(user) -> str:
    return create_access_token(subject=str(user.id), data={"role": user.role.value})


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def make_user():
    """
    Factory: await make_user(UserRole.LECTURER, department="Physics")
    """
    counter = {"n": 0}

    async def _make(role: UserRole, department: str | None = None, email: str | None = None):
        counter["n"] += 1
        async with AsyncSessionLocal() as session:
            return await create_user(
                session=session,
                name=f"{role.value.title()} {counter['n']}",
                email=email or f"{role.value.lower()}{counter['n']}@faculty.example.com",
                password=DEFAULT_PASSWORD,
                role=role,
                department=department,
            )

    return _make


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user(UserRole.FACULTY_ADMIN, department="Physics")


@pytest_asyncio.fixture
async def officer(make_user):
    return await make_user(UserRole.DEPARTMENTAL_OFFICER, department="Physics")


@pytest_asyncio.fixture
async def lecturer(make_user):
    return await make_user(UserRole.LECTURER, department="Physics")


@pytest_asyncio.fixture
async def course_rep(make_user):
    return await make_user(UserRole.COURSE_REP, department="Physics")


@pytest.fixture
def headers_for():
    return auth_headers

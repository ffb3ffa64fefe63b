# app/services/auth_service.py

from sqlmodel import select
from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid
from typing import List

from app.core.config import settings
from app.core.errors import InvalidOperation, NotFound
from app.models.approval import Approval
from app.models.asset import Asset
from app.models.asset_request import AssetRequest
from app.models.maintenance import MaintenanceRecord
from app.models.notification import Notification
from app.models.system_config import SystemConfig
from app.models.transfer import Transfer
from app.models.user import User, UserRole
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.schemas.auth import TokenWithUser
from app.schemas.user import UserRead, UserUpdate


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USER BY ID
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USERS BY ROLE
# ============================================================================
async def list_users_with_roles(
    session: AsyncSession,
    roles: List[UserRole],
    department: str | None = None,
) -> List[User]:
    query = select(User).where(User.role.in_(roles))
    if department:
        query = query.where(User.department == department)
    result = await session.execute(query.order_by(User.created_at))
    return list(result.scalars().all())


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    department: str | None = None,
    employee_id: str | None = None,
) -> User:
    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        department=department,
        employee_id=employee_id,
    )

    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise InvalidOperation("User already exists")


# ============================================================================
# AUTHENTICATE (email + password)
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def create_login_response(user: User) -> TokenWithUser:
    # The role travels in the token; the route guard never touches the DB
    token = create_access_token(
        subject=str(user.id),
        data={"role": user.role.value},
    )

    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
    )


# ============================================================================
# LIST USERS
# ============================================================================
async def list_users(session: AsyncSession) -> List[User]:
    result = await session.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


# ============================================================================
# UPDATE / DELETE USER
# ============================================================================
async def get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def update_user(session: AsyncSession, user_id: uuid.UUID, data: UserUpdate) -> User:
    user = await get_user_or_404(session, user_id)
    changes = data.model_dump(exclude_unset=True, exclude={"password"})

    new_email = changes.get("email")
    if new_email and new_email != user.email and await get_user_by_email(session, new_email):
        raise InvalidOperation("Email already exists")

    for field, value in changes.items():
        setattr(user, field, value)
    if data.password:
        user.password_hash = hash_password(data.password)

    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def _count(session: AsyncSession, query) -> int:
    return (await session.execute(query)).scalar_one()


async def delete_user(session: AsyncSession, user_id: uuid.UUID, acting_user_id: uuid.UUID) -> None:
    if user_id == acting_user_id:
        raise InvalidOperation("Cannot delete your own account")

    user = await get_user_or_404(session, user_id)

    linked = (
        await _count(session, select(func.count()).select_from(Asset).where(
            (Asset.registered_by == user_id) | (Asset.allocated_to == user_id)
        ))
        + await _count(session, select(func.count()).select_from(AssetRequest).where(
            (AssetRequest.requested_by == user_id)
            | (AssetRequest.issued_by == user_id)
            | (AssetRequest.verified_by == user_id)
        ))
        + await _count(session, select(func.count()).select_from(Transfer).where(
            (Transfer.from_user_id == user_id)
            | (Transfer.to_user_id == user_id)
            | (Transfer.initiated_by == user_id)
        ))
        + await _count(session, select(func.count()).select_from(Approval).where(Approval.approved_by == user_id))
        + await _count(session, select(func.count()).select_from(MaintenanceRecord).where(
            (MaintenanceRecord.created_by == user_id) | (MaintenanceRecord.performed_by == user_id)
        ))
    )
    if linked:
        raise InvalidOperation(
            "Cannot delete user with associated assets, requests, or transfers. Consider deactivating instead."
        )

    await session.execute(delete(Notification).where(Notification.user_id == user_id))
    await session.execute(
        update(SystemConfig).where(SystemConfig.updated_by == user_id).values(updated_by=None)
    )
    await session.delete(user)
    await session.commit()

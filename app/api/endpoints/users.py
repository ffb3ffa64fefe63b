# app/api/endpoints/users.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_db_session, require_user_admin, session_user_uuid
from app.core.session import SessionUser
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services.activity_service import log_activity
from app.services.auth_service import create_user, delete_user, get_user_or_404, list_users, update_user

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------------------------------------------
# LIST ALL USERS
# -------------------------------------------------------------------
@router.get("", response_model=List[UserRead])
async def get_all_users(
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(require_user_admin),
):
    return await list_users(session)


# -------------------------------------------------------------------
# CREATE USER (any role)
# -------------------------------------------------------------------
@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    data: UserCreate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_user_admin),
):
    user = await create_user(
        session=session,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        department=data.department,
        employee_id=data.employee_id,
    )

    await log_activity(
        action="CREATE",
        entity_type="User",
        entity_id=str(user.id),
        description=f"Created {user.role.value} account for {user.email}",
        user_id=session_user_uuid(current),
        request=request,
    )
    return user


# -------------------------------------------------------------------
# DETAIL / UPDATE / DELETE
# -------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserRead)
async def get_user_detail(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: SessionUser = Depends(require_user_admin),
):
    return await get_user_or_404(session, user_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user_endpoint(
    user_id: UUID,
    data: UserUpdate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_user_admin),
):
    user = await update_user(session, user_id, data)

    await log_activity(
        action="UPDATE",
        entity_type="User",
        entity_id=str(user.id),
        description=f"Updated account {user.email}",
        details={"fields": sorted(data.model_dump(exclude_unset=True, exclude={"password"}))},
        user_id=session_user_uuid(current),
        request=request,
    )
    return user


@router.delete("/{user_id}")
async def delete_user_endpoint(
    user_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_user_admin),
):
    acting_id = session_user_uuid(current)
    await delete_user(session, user_id, acting_id)

    await log_activity(
        action="DELETE",
        entity_type="User",
        entity_id=str(user_id),
        description="Deleted user account",
        user_id=acting_id,
        request=request,
    )
    return {"message": "User deleted successfully"}

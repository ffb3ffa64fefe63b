# app/api/endpoints/requests.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import (
    get_current_session,
    get_db_session,
    require_permission,
    require_request_approver,
    session_user_uuid,
)
from app.core.permissions import Permission
from app.core.session import SessionUser
from app.models.enums import ApprovalDecision, RequestStatus
from app.schemas.asset_request import (
    AssetRequestCreate,
    AssetRequestRead,
    AssetRequestUpdate,
    DecisionRequest,
    ReturnVerification,
)
from app.services.activity_service import log_activity
from app.services.request_service import (
    create_request,
    decide_request,
    delete_request,
    get_visible_request,
    list_requests,
    return_request,
    update_request,
    verify_return,
)

router = APIRouter(prefix="/api/requests", tags=["Requests"])


@router.get("", response_model=List[AssetRequestRead])
async def get_requests(
    status: Optional[RequestStatus] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await list_requests(session, current.role, session_user_uuid(current), status=status)


@router.post("", response_model=AssetRequestRead, status_code=status.HTTP_201_CREATED)
async def submit_request(
    data: AssetRequestCreate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_permission(Permission.CREATE_REQUEST)),
):
    requester_id = session_user_uuid(current)
    asset_request = await create_request(session, data, requester_id)

    await log_activity(
        action="CREATE",
        entity_type="AssetRequest",
        entity_id=str(asset_request.id),
        description=f"Requested {asset_request.requested_quantity} unit(s) of asset {asset_request.asset_id}",
        user_id=requester_id,
        request=request,
    )
    return asset_request


# -------------------------------------------------------------------
# APPROVE / REJECT
# -------------------------------------------------------------------
@router.post("/{request_id}/approve", response_model=AssetRequestRead)
async def approve_request(
    request_id: UUID,
    decision: DecisionRequest,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_request_approver),
):
    approver_id = session_user_uuid(current)
    asset_request = await decide_request(session, request_id, decision, approver_id)

    await log_activity(
        action="APPROVE" if decision.status == ApprovalDecision.APPROVED else "REJECT",
        entity_type="AssetRequest",
        entity_id=str(asset_request.id),
        description=f"Request {decision.status.value.lower()}",
        details={"comments": decision.comments} if decision.comments else None,
        user_id=approver_id,
        request=request,
    )
    return asset_request


# -------------------------------------------------------------------
# DETAIL / EDIT / WITHDRAW
# -------------------------------------------------------------------
@router.get("/{request_id}", response_model=AssetRequestRead)
async def get_request_detail(
    request_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await get_visible_request(session, request_id, current.role, session_user_uuid(current))


@router.patch("/{request_id}", response_model=AssetRequestRead)
async def edit_request(
    request_id: UUID,
    data: AssetRequestUpdate,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await update_request(session, request_id, data, current.role, session_user_uuid(current))


@router.delete("/{request_id}")
async def withdraw_request(
    request_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    user_id = session_user_uuid(current)
    await delete_request(session, request_id, current.role, user_id)

    await log_activity(
        action="DELETE",
        entity_type="AssetRequest",
        entity_id=str(request_id),
        description="Withdrew pending request",
        user_id=user_id,
        request=request,
    )
    return {"message": "Request deleted successfully"}


# -------------------------------------------------------------------
# RETURN (requester) / VERIFY RETURN (officer or admin)
# -------------------------------------------------------------------
@router.post("/{request_id}/return", response_model=AssetRequestRead)
async def hand_back_request(
    request_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    user_id = session_user_uuid(current)
    asset_request = await return_request(session, request_id, user_id)

    await log_activity(
        action="RETURN",
        entity_type="AssetRequest",
        entity_id=str(asset_request.id),
        description=f"Returned {asset_request.requested_quantity} unit(s) of asset {asset_request.asset_id}",
        user_id=user_id,
        request=request,
    )
    return asset_request


@router.post("/{request_id}/verify-return", response_model=AssetRequestRead)
async def check_in_return(
    request_id: UUID,
    data: ReturnVerification,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_request_approver),
):
    verifier_id = session_user_uuid(current)
    asset_request = await verify_return(session, request_id, data, verifier_id)

    await log_activity(
        action="VERIFY_RETURN",
        entity_type="AssetRequest",
        entity_id=str(asset_request.id),
        description=f"Verified return in {data.verified_condition.value} condition",
        details={"notes": data.verification_notes} if data.verification_notes else None,
        user_id=verifier_id,
        request=request,
    )
    return asset_request

# app/api/endpoints/transfers.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import get_current_session, get_db_session, require_permission, session_user_uuid
from app.core.errors import NotFound
from app.core.permissions import Permission
from app.core.session import SessionUser
from app.models.enums import ApprovalDecision, TransferStatus
from app.schemas.asset_request import DecisionRequest
from app.schemas.transfer import TransferCreate, TransferRead, TransferReceipt, TransferUpdate
from app.services.activity_service import log_activity
from app.services.auth_service import get_user_by_id
from app.services.transfer_service import (
    build_receipt,
    create_transfer,
    decide_transfer,
    delete_transfer,
    get_visible_transfer,
    list_transfers,
    update_transfer,
)

router = APIRouter(prefix="/api/transfers", tags=["Transfers"])

# Officers and admins move stock; lecturers hand back their own allocations
require_transfer_initiator = require_permission(
    Permission.INITIATE_TRANSFERS,
    Permission.TRANSFER_OWN_ASSETS,
    any_of=True,
)


@router.get("", response_model=List[TransferRead])
async def get_transfers(
    status: Optional[TransferStatus] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await list_transfers(session, current.role, session_user_uuid(current), status=status)


@router.post("", response_model=TransferRead, status_code=status.HTTP_201_CREATED)
async def initiate_transfer(
    data: TransferCreate,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_transfer_initiator),
):
    initiator = await get_user_by_id(session, session_user_uuid(current))
    if not initiator:
        raise NotFound("User not found")

    transfer = await create_transfer(session, data, initiator)

    await log_activity(
        action="CREATE",
        entity_type="Transfer",
        entity_id=str(transfer.id),
        description=f"Initiated {transfer.transfer_type.value} transfer of asset {transfer.asset_id}",
        details={"to_user_id": str(transfer.to_user_id), "quantity": transfer.transfer_quantity},
        user_id=initiator.id,
        request=request,
    )
    return transfer


# -------------------------------------------------------------------
# APPROVE / REJECT (scope depends on the transfer type)
# -------------------------------------------------------------------
@router.post("/{transfer_id}/approve", response_model=TransferRead)
async def approve_transfer(
    transfer_id: UUID,
    decision: DecisionRequest,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_permission(Permission.APPROVE_TRANSFERS)),
):
    approver_id = session_user_uuid(current)
    transfer = await decide_transfer(session, transfer_id, decision, approver_id, current.role)

    await log_activity(
        action="APPROVE" if decision.status == ApprovalDecision.APPROVED else "REJECT",
        entity_type="Transfer",
        entity_id=str(transfer.id),
        description=f"Transfer {decision.status.value.lower()}",
        details={"receipt_number": transfer.receipt_number} if transfer.receipt_number else None,
        user_id=approver_id,
        request=request,
    )
    return transfer


# -------------------------------------------------------------------
# DETAIL / EDIT / WITHDRAW
# -------------------------------------------------------------------
@router.get("/{transfer_id}", response_model=TransferRead)
async def get_transfer_detail(
    transfer_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await get_visible_transfer(session, transfer_id, current.role, session_user_uuid(current))


@router.patch("/{transfer_id}", response_model=TransferRead)
async def edit_transfer(
    transfer_id: UUID,
    data: TransferUpdate,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_transfer_initiator),
):
    return await update_transfer(session, transfer_id, data, current.role, session_user_uuid(current))


@router.delete("/{transfer_id}")
async def withdraw_transfer(
    transfer_id: UUID,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_transfer_initiator),
):
    user_id = session_user_uuid(current)
    await delete_transfer(session, transfer_id, current.role, user_id)

    await log_activity(
        action="DELETE",
        entity_type="Transfer",
        entity_id=str(transfer_id),
        description="Withdrew pending transfer",
        user_id=user_id,
        request=request,
    )
    return {"message": "Transfer deleted successfully"}


@router.get("/{transfer_id}/receipt", response_model=TransferReceipt)
async def get_transfer_receipt(
    transfer_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(get_current_session),
):
    return await build_receipt(session, transfer_id, current.role, session_user_uuid(current))

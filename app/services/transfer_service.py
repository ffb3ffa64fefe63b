# app/services/transfer_service.py

import time
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AccessDenied, InvalidOperation, NotFound
from app.core.permissions import Permission
from app.core.rbac import has_all_permissions
from app.models.approval import Approval
from app.models.asset import Asset
from app.models.enums import ApprovalDecision, AssetStatus, NotificationType, TransferStatus, TransferType
from app.models.transfer import Transfer
from app.models.user import User, UserRole
from app.schemas.asset_request import DecisionRequest
from app.schemas.transfer import (
    TO_STOCK,
    ReceiptAsset,
    ReceiptDetails,
    ReceiptParty,
    TransferCreate,
    TransferReceipt,
    TransferUpdate,
)
from app.services.asset_service import get_asset
from app.services.auth_service import get_user_by_id, list_users_with_roles
from app.services.notification_service import queue_for_roles, queue_notification

# Anything else (pending registration, maintenance, retired) stays put
TRANSFERABLE_STATUSES = (AssetStatus.AVAILABLE, AssetStatus.ALLOCATED)


def approval_permissions(transfer_type: TransferType) -> List[Permission]:
    """Everything a role must hold to approve a transfer of this type."""
    scoped = (
        Permission.APPROVE_IN_DEPARTMENT_TRANSFERS
        if transfer_type == TransferType.INTRA_DEPARTMENTAL
        else Permission.APPROVE_INTER_DEPARTMENTAL_TRANSFERS
    )
    return [Permission.APPROVE_TRANSFERS, scoped]


def make_receipt_number(transfer_id: UUID) -> str:
    return f"TRF-{int(time.time() * 1000)}-{str(transfer_id)[:6].upper()}"


def classify_transfer(from_department: Optional[str], to_department: Optional[str]) -> TransferType:
    if from_department and to_department and from_department == to_department:
        return TransferType.INTRA_DEPARTMENTAL
    return TransferType.INTER_DEPARTMENTAL


async def get_transfer(session: AsyncSession, transfer_id: UUID) -> Transfer:
    transfer = await session.get(Transfer, transfer_id)
    if not transfer:
        raise NotFound("Transfer not found")
    return transfer


async def list_transfers(
    session: AsyncSession,
    role: UserRole,
    user_id: UUID,
    status: Optional[TransferStatus] = None,
) -> List[Transfer]:
    query = select(Transfer).order_by(Transfer.created_at.desc())

    # Lecturers see transfers they are a party to; officers and admins see all
    if role == UserRole.LECTURER:
        query = query.where((Transfer.from_user_id == user_id) | (Transfer.to_user_id == user_id))
    if status:
        query = query.where(Transfer.status == status)

    result = await session.execute(query)
    return list(result.scalars().all())


def _check_quantity(asset: Asset, initiator: User, quantity: int) -> None:
    if initiator.role == UserRole.LECTURER:
        if asset.allocated_to != initiator.id:
            raise AccessDenied("You can only transfer assets that are allocated to you")
        if quantity > asset.allocated_quantity:
            raise InvalidOperation(
                f"Insufficient quantity. You have {asset.allocated_quantity} unit(s) allocated, "
                f"but requested {quantity}"
            )
    elif asset.available_quantity < quantity:
        raise InvalidOperation(
            f"Insufficient quantity. Available: {asset.available_quantity}, Requested: {quantity}"
        )


async def _resolve_recipient(session: AsyncSession, data: TransferCreate, initiator: User) -> User:
    if data.to_user_id in (TO_STOCK, ""):
        # Back to stock: hand it to an officer, preferably of the initiator's department
        officers = await list_users_with_roles(
            session,
            [UserRole.DEPARTMENTAL_OFFICER, UserRole.FACULTY_ADMIN],
            department=initiator.department,
        )
        if not officers:
            raise NotFound("No officer found to receive the asset")
        return officers[0]

    try:
        recipient_id = UUID(data.to_user_id)
    except ValueError:
        raise InvalidOperation("to_user_id must be a user id or STOCK")

    recipient = await get_user_by_id(session, recipient_id)
    if not recipient:
        raise NotFound("Recipient user not found")
    return recipient


# ============================================================================
# INITIATE
# ============================================================================
async def create_transfer(session: AsyncSession, data: TransferCreate, initiator: User) -> Transfer:
    asset = await get_asset(session, data.asset_id)
    if asset.status == AssetStatus.TRANSFER_PENDING:
        raise InvalidOperation("Asset already has a pending transfer")
    if asset.status not in TRANSFERABLE_STATUSES:
        raise InvalidOperation(f"Asset cannot be transferred while {asset.status.value}")
    _check_quantity(asset, initiator, data.transfer_quantity)
    recipient = await _resolve_recipient(session, data, initiator)

    if initiator.role == UserRole.LECTURER:
        from_user_id = initiator.id
    else:
        from_user_id = data.from_user_id or asset.allocated_to

    # General stock belongs to no department, so issuing it is always inter-departmental
    from_department = None
    if from_user_id:
        holder = await get_user_by_id(session, from_user_id)
        from_department = holder.department if holder else None
    transfer_type = classify_transfer(from_department, recipient.department)

    transfer = Transfer(
        asset_id=asset.id,
        from_user_id=from_user_id,
        to_user_id=recipient.id,
        initiated_by=initiator.id,
        transfer_quantity=data.transfer_quantity,
        transfer_type=transfer_type,
        status=TransferStatus.PENDING,
        previous_asset_status=asset.status,
        reason=data.reason,
        notes=data.notes,
    )
    session.add(transfer)

    # Quantities move only on approval
    asset.status = AssetStatus.TRANSFER_PENDING
    asset.updated_at = datetime.now(timezone.utc)
    session.add(asset)
    await session.flush()

    kind = transfer_type.value.lower().replace("_", "-")
    await queue_for_roles(
        session,
        [UserRole.FACULTY_ADMIN],
        NotificationType.TRANSFER_PENDING,
        "Transfer Request Pending Approval",
        f"{initiator.name} initiated a {kind} transfer of {transfer.transfer_quantity} unit(s) of "
        f'"{asset.name}" ({asset.asset_code}) to {recipient.name}. Requires admin approval.',
        related_asset_id=asset.id,
    )

    await session.commit()
    await session.refresh(transfer)
    return transfer


# ============================================================================
# APPROVE / REJECT
# ============================================================================
async def decide_transfer(
    session: AsyncSession,
    transfer_id: UUID,
    decision: DecisionRequest,
    approver_id: UUID,
    approver_role: UserRole,
) -> Transfer:
    transfer = await get_transfer(session, transfer_id)
    if transfer.status != TransferStatus.PENDING:
        raise InvalidOperation("Transfer is not pending")

    if not has_all_permissions(approver_role, approval_permissions(transfer.transfer_type)):
        raise AccessDenied("Forbidden")

    asset = await get_asset(session, transfer.asset_id)
    recipient = await get_user_by_id(session, transfer.to_user_id)
    now = datetime.now(timezone.utc)
    approved = decision.status == ApprovalDecision.APPROVED

    session.add(Approval(
        transfer_id=transfer.id,
        approved_by=approver_id,
        status=decision.status,
        comments=decision.comments,
    ))

    parties = [transfer.to_user_id]
    if transfer.from_user_id and transfer.from_user_id != transfer.to_user_id:
        parties.append(transfer.from_user_id)

    if approved:
        transfer.status = TransferStatus.APPROVED
        transfer.approved_at = now
        transfer.completed_at = now
        transfer.receipt_number = make_receipt_number(transfer.id)

        asset.status = AssetStatus.ALLOCATED
        asset.allocated_to = transfer.to_user_id
        if transfer.from_user_id is None:
            # Leaving general stock increases what is handed out
            asset.allocated_quantity = (asset.allocated_quantity or 0) + transfer.transfer_quantity
        if recipient and recipient.department:
            asset.location = recipient.department

        for user_id in parties:
            queue_notification(
                session,
                user_id,
                NotificationType.TRANSFER_APPROVED,
                "Asset Transfer Approved",
                f'Transfer of "{asset.name}" has been approved. Receipt: {transfer.receipt_number}',
                related_asset_id=asset.id,
            )
    else:
        transfer.status = TransferStatus.REJECTED
        asset.status = transfer.previous_asset_status

        reason = f" Reason: {decision.comments}" if decision.comments else ""
        for user_id in parties:
            queue_notification(
                session,
                user_id,
                NotificationType.TRANSFER_REJECTED,
                "Asset Transfer Rejected",
                f'Transfer of "{asset.name}" has been rejected.{reason}',
                related_asset_id=asset.id,
            )

    asset.updated_at = now
    session.add(asset)
    session.add(transfer)
    await session.commit()
    await session.refresh(transfer)
    return transfer


# ============================================================================
# DETAIL / EDIT / WITHDRAW
# ============================================================================
def _is_party(transfer: Transfer, user_id: UUID) -> bool:
    return user_id in (transfer.from_user_id, transfer.to_user_id)


async def get_visible_transfer(
    session: AsyncSession,
    transfer_id: UUID,
    role: UserRole,
    user_id: UUID,
) -> Transfer:
    transfer = await get_transfer(session, transfer_id)
    if role == UserRole.LECTURER and not _is_party(transfer, user_id):
        raise AccessDenied("Forbidden")
    return transfer


async def _pending_transfer_for(
    session: AsyncSession,
    transfer_id: UUID,
    role: UserRole,
    user_id: UUID,
    action: str,
) -> Transfer:
    transfer = await get_transfer(session, transfer_id)
    if transfer.status != TransferStatus.PENDING:
        raise InvalidOperation(f"Can only {action} pending transfers")
    # Lecturers may only touch transfers they are handing over
    if role == UserRole.LECTURER and transfer.from_user_id != user_id:
        raise AccessDenied("Forbidden")
    return transfer


async def update_transfer(
    session: AsyncSession,
    transfer_id: UUID,
    data: TransferUpdate,
    role: UserRole,
    user_id: UUID,
) -> Transfer:
    transfer = await _pending_transfer_for(session, transfer_id, role, user_id, "update")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(transfer, field, value)

    session.add(transfer)
    await session.commit()
    await session.refresh(transfer)
    return transfer


async def delete_transfer(
    session: AsyncSession,
    transfer_id: UUID,
    role: UserRole,
    user_id: UUID,
) -> None:
    transfer = await _pending_transfer_for(session, transfer_id, role, user_id, "delete")

    asset = await get_asset(session, transfer.asset_id)
    if asset.status == AssetStatus.TRANSFER_PENDING:
        asset.status = transfer.previous_asset_status
        asset.updated_at = datetime.now(timezone.utc)
        session.add(asset)

    await session.delete(transfer)
    await session.commit()


# ============================================================================
# RECEIPT
# ============================================================================
def _party(user: Optional[User]) -> Optional[ReceiptParty]:
    return ReceiptParty.model_validate(user) if user else None


async def _optional_user(session: AsyncSession, user_id: Optional[UUID]) -> Optional[User]:
    return await get_user_by_id(session, user_id) if user_id else None


async def build_receipt(
    session: AsyncSession,
    transfer_id: UUID,
    role: UserRole,
    user_id: UUID,
) -> TransferReceipt:
    transfer = await get_transfer(session, transfer_id)

    involved = _is_party(transfer, user_id) or transfer.initiated_by == user_id
    if role != UserRole.FACULTY_ADMIN and not involved:
        raise AccessDenied("Forbidden")

    if transfer.status != TransferStatus.APPROVED:
        raise InvalidOperation("Transfer receipt can only be generated for approved transfers")

    asset = await get_asset(session, transfer.asset_id)
    result = await session.execute(
        select(Approval)
        .where(Approval.transfer_id == transfer.id)
        .order_by(Approval.created_at.desc())
        .limit(1)
    )
    approval = result.scalar_one_or_none()

    return TransferReceipt(
        receipt=ReceiptDetails(
            receipt_number=transfer.receipt_number,
            generated_at=transfer.completed_at,
            transfer_date=transfer.completed_at or transfer.approved_at,
            transfer_type=transfer.transfer_type,
            status=transfer.status,
        ),
        asset=ReceiptAsset.model_validate(asset),
        transfer_quantity=transfer.transfer_quantity,
        from_user=_party(await _optional_user(session, transfer.from_user_id)),
        to_user=_party(await _optional_user(session, transfer.to_user_id)),
        initiated_by=_party(await _optional_user(session, transfer.initiated_by)),
        approved_by=_party(await _optional_user(session, approval.approved_by if approval else None)),
        reason=transfer.reason,
        notes=transfer.notes,
        requested_at=transfer.created_at,
        approved_at=transfer.approved_at,
        completed_at=transfer.completed_at,
    )

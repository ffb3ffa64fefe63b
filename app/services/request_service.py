# app/services/request_service.py

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AccessDenied, InvalidOperation, NotFound
from app.models.approval import Approval
from app.models.asset import Asset
from app.models.asset_request import AssetRequest
from app.models.enums import ApprovalDecision, AssetStatus, NotificationType, RequestStatus, ReturnCondition
from app.models.user import UserRole
from app.schemas.asset_request import AssetRequestCreate, AssetRequestUpdate, DecisionRequest, ReturnVerification
from app.services.asset_service import get_asset, shelf_status
from app.services.notification_service import queue_for_roles, queue_notification

STOCK_WATCHERS = (UserRole.DEPARTMENTAL_OFFICER, UserRole.FACULTY_ADMIN)

# Where a verified return sends the asset; anything else goes back on the shelf
RETURN_DESTINATIONS = {
    ReturnCondition.DAMAGED: AssetStatus.MAINTENANCE,
    ReturnCondition.NEEDS_REPAIR: AssetStatus.MAINTENANCE,
    ReturnCondition.LOST: AssetStatus.RETIRED,
}


async def get_request(session: AsyncSession, request_id: UUID) -> AssetRequest:
    request = await session.get(AssetRequest, request_id)
    if not request:
        raise NotFound("Request not found")
    return request


async def list_requests(
    session: AsyncSession,
    role: UserRole,
    user_id: UUID,
    status: Optional[RequestStatus] = None,
) -> List[AssetRequest]:
    query = select(AssetRequest).order_by(AssetRequest.created_at.desc())

    # Lecturers only ever see their own requests
    if role == UserRole.LECTURER:
        query = query.where(AssetRequest.requested_by == user_id)
    if status:
        query = query.where(AssetRequest.status == status)

    result = await session.execute(query)
    return list(result.scalars().all())


async def create_request(session: AsyncSession, data: AssetRequestCreate, requester_id: UUID) -> AssetRequest:
    asset = await get_asset(session, data.asset_id)
    if asset.status != AssetStatus.AVAILABLE:
        raise InvalidOperation("Asset is not available")

    request = AssetRequest(
        asset_id=asset.id,
        requested_by=requester_id,
        requested_quantity=data.requested_quantity,
        purpose=data.purpose,
        notes=data.notes,
        status=RequestStatus.PENDING,
    )
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def _notify_stock_level(session: AsyncSession, asset: Asset) -> None:
    available = asset.available_quantity

    if available <= 0:
        await queue_for_roles(
            session,
            STOCK_WATCHERS,
            NotificationType.STOCK_OUT,
            "Asset Stock Depleted",
            f'All units of "{asset.name}" ({asset.asset_code}) have been allocated. '
            f"Total: {asset.quantity}, Allocated: {asset.allocated_quantity}",
            related_asset_id=asset.id,
        )
    elif asset.min_stock_level and available <= asset.min_stock_level:
        await queue_for_roles(
            session,
            STOCK_WATCHERS,
            NotificationType.STOCK_LOW,
            "Low Stock Alert",
            f'"{asset.name}" ({asset.asset_code}) is running low. '
            f"Available: {available}, Minimum: {asset.min_stock_level}",
            related_asset_id=asset.id,
        )


# ============================================================================
# APPROVE / REJECT
# ============================================================================
async def decide_request(
    session: AsyncSession,
    request_id: UUID,
    decision: DecisionRequest,
    approver_id: UUID,
) -> AssetRequest:
    request = await get_request(session, request_id)
    if request.status != RequestStatus.PENDING:
        raise InvalidOperation("Request is not pending")

    asset = await get_asset(session, request.asset_id)
    approved = decision.status == ApprovalDecision.APPROVED
    now = datetime.now(timezone.utc)

    if approved and asset.available_quantity < request.requested_quantity:
        raise InvalidOperation(
            f"Insufficient quantity. Available: {asset.available_quantity}, "
            f"Requested: {request.requested_quantity}"
        )

    request.status = RequestStatus.FULFILLED if approved else RequestStatus.REJECTED
    request.approved_at = now

    session.add(Approval(
        request_id=request.id,
        approved_by=approver_id,
        status=decision.status,
        comments=decision.comments,
    ))

    if approved:
        request.issued_by = approver_id
        request.issued_at = now
        request.fulfilled_at = now
        request.issuance_condition = decision.issuance_condition
        request.issuance_notes = decision.issuance_notes

        asset.allocated_quantity = (asset.allocated_quantity or 0) + request.requested_quantity
        asset.allocated_to = request.requested_by
        asset.status = AssetStatus.ALLOCATED if asset.available_quantity <= 0 else AssetStatus.AVAILABLE
        asset.updated_at = now
        session.add(asset)

        await _notify_stock_level(session, asset)

        queue_notification(
            session,
            request.requested_by,
            NotificationType.REQUEST_APPROVED,
            "Asset Request Approved",
            f'Your request for {request.requested_quantity} unit(s) of "{asset.name}" has been approved.',
            related_request_id=request.id,
        )
    else:
        reason = f" Reason: {decision.comments}" if decision.comments else ""
        queue_notification(
            session,
            request.requested_by,
            NotificationType.REQUEST_REJECTED,
            "Asset Request Rejected",
            f'Your request for "{asset.name}" has been rejected.{reason}',
            related_request_id=request.id,
        )

    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


# ============================================================================
# DETAIL / EDIT / WITHDRAW
# ============================================================================
async def get_visible_request(
    session: AsyncSession,
    request_id: UUID,
    role: UserRole,
    user_id: UUID,
) -> AssetRequest:
    request = await get_request(session, request_id)
    if role == UserRole.LECTURER and request.requested_by != user_id:
        raise AccessDenied("Forbidden")
    return request


async def update_request(
    session: AsyncSession,
    request_id: UUID,
    data: AssetRequestUpdate,
    role: UserRole,
    user_id: UUID,
) -> AssetRequest:
    request = await get_request(session, request_id)
    if request.status != RequestStatus.PENDING:
        raise InvalidOperation("Can only update pending requests")
    if role == UserRole.LECTURER and request.requested_by != user_id:
        raise AccessDenied("Forbidden")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(request, field, value)

    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def delete_request(session: AsyncSession, request_id: UUID, role: UserRole, user_id: UUID) -> None:
    request = await get_request(session, request_id)
    if request.status != RequestStatus.PENDING:
        raise InvalidOperation("Can only delete pending requests")
    if role == UserRole.LECTURER and request.requested_by != user_id:
        raise AccessDenied("Forbidden")

    await session.delete(request)
    await session.commit()


# ============================================================================
# RETURN / VERIFY
# ============================================================================
async def return_request(session: AsyncSession, request_id: UUID, user_id: UUID) -> AssetRequest:
    request = await get_request(session, request_id)
    if request.requested_by != user_id:
        raise AccessDenied("Forbidden")
    if request.status != RequestStatus.FULFILLED:
        raise InvalidOperation("Request is not fulfilled")

    asset = await get_asset(session, request.asset_id)
    if asset.status == AssetStatus.TRANSFER_PENDING:
        raise InvalidOperation("Asset has a pending transfer")

    now = datetime.now(timezone.utc)
    request.status = RequestStatus.RETURNED
    request.returned_at = now

    asset.allocated_quantity = max((asset.allocated_quantity or 0) - request.requested_quantity, 0)
    if asset.allocated_quantity == 0:
        asset.allocated_to = None
    if asset.status in (AssetStatus.AVAILABLE, AssetStatus.ALLOCATED):
        asset.status = shelf_status(asset)
    asset.updated_at = now

    session.add(asset)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def verify_return(
    session: AsyncSession,
    request_id: UUID,
    data: ReturnVerification,
    verifier_id: UUID,
) -> AssetRequest:
    request = await get_request(session, request_id)
    if request.status != RequestStatus.RETURNED:
        raise InvalidOperation("Request is not in returned status")
    if request.verified_at:
        raise InvalidOperation("Return already verified")

    asset = await get_asset(session, request.asset_id)
    if asset.status == AssetStatus.TRANSFER_PENDING:
        raise InvalidOperation("Asset has a pending transfer")

    now = datetime.now(timezone.utc)
    request.verified_by = verifier_id
    request.verified_at = now
    request.return_condition = data.verified_condition
    request.return_notes = data.verification_notes

    asset.status = RETURN_DESTINATIONS.get(data.verified_condition, shelf_status(asset))
    asset.updated_at = now

    queue_notification(
        session,
        request.requested_by,
        NotificationType.RETURN_VERIFIED,
        "Return Verified",
        f'Your return of "{asset.name}" has been verified. Condition: {data.verified_condition.value}',
        related_request_id=request.id,
    )

    session.add(asset)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request

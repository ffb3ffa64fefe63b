# app/services/dashboard_service.py

from typing import Any, Dict
from uuid import UUID

from sqlmodel import select
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.asset import Asset
from app.models.asset_request import AssetRequest
from app.models.enums import AssetStatus, AssetType, RequestStatus, TransferStatus
from app.models.transfer import Transfer


async def _count(session: AsyncSession, model, *conditions) -> int:
    query = select(func.count()).select_from(model)
    if conditions:
        query = query.where(*conditions)
    result = await session.execute(query)
    return result.scalar_one()


async def admin_summary(session: AsyncSession) -> Dict[str, Any]:
    return {
        "assets": {
            "total": await _count(session, Asset),
            "available": await _count(session, Asset, Asset.status == AssetStatus.AVAILABLE),
            "allocated": await _count(session, Asset, Asset.status == AssetStatus.ALLOCATED),
            "pending_approval": await _count(session, Asset, Asset.status == AssetStatus.PENDING_APPROVAL),
        },
        "requests": {
            "total": await _count(session, AssetRequest),
            "pending": await _count(session, AssetRequest, AssetRequest.status == RequestStatus.PENDING),
        },
        "transfers": {
            "total": await _count(session, Transfer),
            "pending": await _count(session, Transfer, Transfer.status == TransferStatus.PENDING),
        },
    }


async def officer_summary(session: AsyncSession) -> Dict[str, Any]:
    return {
        "total_assets": await _count(session, Asset),
        "available_assets": await _count(session, Asset, Asset.status == AssetStatus.AVAILABLE),
        "pending_requests": await _count(session, AssetRequest, AssetRequest.status == RequestStatus.PENDING),
    }


async def lecturer_summary(session: AsyncSession, user_id: UUID) -> Dict[str, Any]:
    return {
        "my_requests": await _count(session, AssetRequest, AssetRequest.requested_by == user_id),
        "pending_requests": await _count(
            session,
            AssetRequest,
            AssetRequest.requested_by == user_id,
            AssetRequest.status == RequestStatus.PENDING,
        ),
        "my_allocations": await _count(
            session,
            Asset,
            Asset.allocated_to == user_id,
            Asset.allocated_quantity >= 1,
        ),
    }


async def course_rep_summary(session: AsyncSession) -> Dict[str, Any]:
    on_shelf = Asset.status == AssetStatus.AVAILABLE
    return {
        "available_consumables": await _count(session, Asset, on_shelf, Asset.type == AssetType.CONSUMABLE),
        "available_teaching_aids": await _count(session, Asset, on_shelf, Asset.type == AssetType.TEACHING_AID),
    }


async def report_summary(session: AsyncSession) -> Dict[str, Any]:
    """Faculty-wide counts, including the lifecycle states the dashboard leaves out."""
    summary = await admin_summary(session)
    summary["assets"]["maintenance"] = await _count(session, Asset, Asset.status == AssetStatus.MAINTENANCE)
    summary["assets"]["retired"] = await _count(session, Asset, Asset.status == AssetStatus.RETIRED)
    summary["requests"]["fulfilled"] = await _count(
        session, AssetRequest, AssetRequest.status == RequestStatus.FULFILLED
    )
    summary["requests"]["returned"] = await _count(
        session, AssetRequest, AssetRequest.status == RequestStatus.RETURNED
    )
    return summary

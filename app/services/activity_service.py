# app/services/activity_service.py

from uuid import UUID
from typing import Optional, Dict, Any, List
from datetime import datetime

from fastapi import Request
from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog
from app.core.database import AsyncSessionLocal


def client_details(request: Optional[Request]) -> Dict[str, str]:
    if request is None:
        return {"ip_address": "unknown", "user_agent": "unknown"}

    ip = request.headers.get("X-Forwarded-For") or request.headers.get("X-Real-IP") or "unknown"
    return {
        "ip_address": ip,
        "user_agent": request.headers.get("User-Agent") or "unknown",
    }


# Manages its own session: a failed log write must never roll back
# or break the business transaction that triggered it.
async def log_activity(
    action: str,
    entity_type: str,
    description: str,
    user_id: Optional[UUID] = None,
    entity_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> None:
    async with AsyncSessionLocal() as session:
        try:
            entry = ActivityLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                description=description,
                details=details,
                **client_details(request),
            )
            session.add(entry)
            await session.commit()

        except Exception as e:
            logger.warning(f"Activity log write failed ({action} {entity_type}): {e}")
            await session.rollback()


async def query_activity(
    session: AsyncSession,
    user_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    action: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = 100,
) -> List[ActivityLog]:
    query = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)

    if user_id:
        query = query.where(ActivityLog.user_id == user_id)
    if entity_type:
        query = query.where(ActivityLog.entity_type == entity_type)
    if entity_id:
        query = query.where(ActivityLog.entity_id == entity_id)
    if action:
        query = query.where(ActivityLog.action == action)
    if start_date:
        query = query.where(ActivityLog.created_at >= start_date)
    if end_date:
        query = query.where(ActivityLog.created_at <= end_date)

    result = await session.execute(query)
    return list(result.scalars().all())

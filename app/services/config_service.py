# app/services/config_service.py

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.system_config import SystemConfig
from app.schemas.system_config import SystemConfigWrite

BARCODE_SCANNING_KEY = "barcode_scanning_enabled"
EMAIL_NOTIFICATION_KEY = "email_notifications_enabled"
SMS_NOTIFICATION_KEY = "sms_notifications_enabled"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


# ============================================================================
# TYPED READERS
# ============================================================================
async def get_config_record(session: AsyncSession, key: str) -> Optional[SystemConfig]:
    result = await session.execute(select(SystemConfig).where(SystemConfig.key == key))
    return result.scalar_one_or_none()


async def get_config(session: AsyncSession, key: str, default: Optional[str] = None) -> Optional[str]:
    record = await get_config_record(session, key)
    return record.value if record else default


async def get_config_bool(session: AsyncSession, key: str, default: bool = False) -> bool:
    value = await get_config(session, key)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False

    logger.warning(f"Config {key}={value!r} is not a boolean, using {default}")
    return default


async def get_config_number(session: AsyncSession, key: str, default: float = 0) -> float:
    value = await get_config(session, key)
    if value is None:
        return default

    try:
        return float(value)
    except ValueError:
        logger.warning(f"Config {key}={value!r} is not a number, using {default}")
        return default


async def is_barcode_scanning_enabled(session: AsyncSession) -> bool:
    return await get_config_bool(session, BARCODE_SCANNING_KEY, True)


async def is_email_notification_enabled(session: AsyncSession) -> bool:
    return await get_config_bool(session, EMAIL_NOTIFICATION_KEY, True)


async def is_sms_notification_enabled(session: AsyncSession) -> bool:
    return await get_config_bool(session, SMS_NOTIFICATION_KEY, False)


# ============================================================================
# LIST / UPSERT
# ============================================================================
async def list_configs(session: AsyncSession, category: Optional[str] = None) -> List[SystemConfig]:
    query = select(SystemConfig).order_by(SystemConfig.key)
    if category:
        query = query.where(SystemConfig.category == category)
    result = await session.execute(query)
    return list(result.scalars().all())


async def upsert_config(session: AsyncSession, data: SystemConfigWrite, updated_by: UUID) -> SystemConfig:
    record = await get_config_record(session, data.key)

    if record:
        record.value = data.value
        if data.description is not None:
            record.description = data.description
        if data.category is not None:
            record.category = data.category
        record.updated_by = updated_by
        record.updated_at = datetime.now(timezone.utc)
    else:
        record = SystemConfig(
            key=data.key,
            value=data.value,
            description=data.description,
            category=data.category,
            updated_by=updated_by,
        )

    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record

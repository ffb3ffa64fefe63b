# app/models/activity_log.py

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, Dict, Any
from uuid import UUID, uuid4
from datetime import datetime, timezone


class ActivityLog(SQLModel, table=True):
    __tablename__ = "activity_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)

    action: str
    entity_type: str
    entity_id: Optional[str] = None
    description: str

    # Free-form context, e.g. {"asset_code": "...", "quantity": 2}
    details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

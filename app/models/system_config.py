# app/models/system_config.py

from sqlmodel import SQLModel, Field
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone


class SystemConfig(SQLModel, table=True):
    __tablename__ = "system_configs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(nullable=False, index=True, unique=True)
    value: str
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, index=True)

    updated_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

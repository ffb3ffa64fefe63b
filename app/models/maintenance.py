# app/models/maintenance.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.models.enums import MaintenanceStatus, MaintenanceType


class MaintenanceRecord(SQLModel, table=True):
    __tablename__ = "maintenance_records"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    asset_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("assets.id"), nullable=False, index=True)
    )

    type: MaintenanceType = Field(
        sa_column=Column(SAEnum(MaintenanceType, name="maintenance_type"), nullable=False)
    )
    status: MaintenanceStatus = Field(
        default=MaintenanceStatus.SCHEDULED,
        sa_column=Column(SAEnum(MaintenanceStatus, name="maintenance_status"), nullable=False)
    )

    scheduled_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    completed_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    next_maintenance_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    service_type: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    vendor: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    technician: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    cost: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    performed_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    created_by: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )

    # Each record is announced once by the reminder sweep
    reminder_sent: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from app.models.enums import MaintenanceStatus, MaintenanceType


class MaintenanceCreate(BaseModel):
    asset_id: UUID
    type: MaintenanceType
    scheduled_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None
    service_type: Optional[str] = None
    vendor: Optional[str] = None
    technician: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class MaintenanceUpdate(BaseModel):
    type: Optional[MaintenanceType] = None
    status: Optional[MaintenanceStatus] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None
    service_type: Optional[str] = None
    vendor: Optional[str] = None
    technician: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    performed_by: Optional[UUID] = None

    class Config:
        extra = "forbid"


class MaintenanceRead(BaseModel):
    id: UUID
    asset_id: UUID
    type: MaintenanceType
    status: MaintenanceStatus
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None
    service_type: Optional[str] = None
    vendor: Optional[str] = None
    technician: Optional[str] = None
    cost: Optional[float] = None
    notes: Optional[str] = None
    performed_by: Optional[UUID] = None
    created_by: UUID
    reminder_sent: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ReminderItem(BaseModel):
    id: UUID
    asset_id: UUID
    asset_name: str
    type: MaintenanceType
    scheduled_date: datetime


class ReminderSweep(BaseModel):
    upcoming_maintenance: int
    notified_users: int
    reminders: List[ReminderItem]

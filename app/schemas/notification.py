from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel

from app.models.enums import NotificationType


class NotificationRead(BaseModel):
    id: UUID
    type: NotificationType
    title: str
    message: str
    read: bool
    related_asset_id: Optional[UUID] = None
    related_request_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MarkReadRequest(BaseModel):
    notification_ids: Optional[List[UUID]] = None
    mark_all_as_read: bool = False

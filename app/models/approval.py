# app/models/approval.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, Text, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.models.enums import ApprovalDecision


class Approval(SQLModel, table=True):
    """One decision on either an asset request or a transfer."""
    __tablename__ = "approvals"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    request_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("asset_requests.id"), nullable=True)
    )
    transfer_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("transfers.id"), nullable=True)
    )

    approved_by: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )
    status: ApprovalDecision = Field(
        sa_column=Column(SAEnum(ApprovalDecision, name="approval_decision"), nullable=False)
    )
    comments: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

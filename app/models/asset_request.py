# app/models/asset_request.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.models.enums import RequestStatus, ReturnCondition


class AssetRequest(SQLModel, table=True):
    __tablename__ = "asset_requests"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    asset_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("assets.id"), nullable=False)
    )
    requested_by: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )
    requested_quantity: int = Field(default=1, sa_column=Column(Integer, nullable=False))

    purpose: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    status: RequestStatus = Field(
        default=RequestStatus.PENDING,
        sa_column=Column(SAEnum(RequestStatus, name="request_status"), nullable=False)
    )

    issued_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    issuance_condition: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    issuance_notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    issued_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    fulfilled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    returned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    # Set when an officer checks the returned item back in
    verified_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    return_condition: Optional[ReturnCondition] = Field(
        default=None,
        sa_column=Column(SAEnum(ReturnCondition, name="return_condition"), nullable=True)
    )
    return_notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

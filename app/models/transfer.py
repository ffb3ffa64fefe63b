# app/models/transfer.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.models.enums import AssetStatus, TransferStatus, TransferType


class Transfer(SQLModel, table=True):
    __tablename__ = "transfers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    asset_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("assets.id"), nullable=False)
    )

    # None when the asset leaves general stock rather than a person
    from_user_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    to_user_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )
    initiated_by: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )

    transfer_quantity: int = Field(default=1, sa_column=Column(Integer, nullable=False))
    transfer_type: TransferType = Field(
        sa_column=Column(SAEnum(TransferType, name="transfer_type"), nullable=False)
    )
    status: TransferStatus = Field(
        default=TransferStatus.PENDING,
        sa_column=Column(SAEnum(TransferStatus, name="transfer_status"), nullable=False)
    )

    # Asset status to restore if the transfer is rejected or withdrawn
    previous_asset_status: AssetStatus = Field(
        sa_column=Column(SAEnum(AssetStatus, name="transfer_previous_asset_status"), nullable=False)
    )

    reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    receipt_number: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

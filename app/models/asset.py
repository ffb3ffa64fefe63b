# app/models/asset.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Float, Uuid, JSON
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional, List

from app.models.enums import AssetType, AssetStatus


class Asset(SQLModel, table=True):
    __tablename__ = "assets"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    name: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    asset_code: str = Field(nullable=False, index=True, unique=True)

    type: AssetType = Field(
        sa_column=Column(SAEnum(AssetType, name="asset_type"), nullable=False)
    )
    status: AssetStatus = Field(
        default=AssetStatus.AVAILABLE,
        sa_column=Column(SAEnum(AssetStatus, name="asset_status"), nullable=False)
    )

    category: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    location: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    room: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    serial_number: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    manufacturer: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    model: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    purchase_price: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))

    # Stock tracking: available = quantity - allocated_quantity
    quantity: int = Field(default=1, sa_column=Column(Integer, nullable=False))
    allocated_quantity: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    min_stock_level: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    unit: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))

    document_urls: Optional[List[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    registered_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    allocated_to: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )

    archived_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    @property
    def available_quantity(self) -> int:
        return (self.quantity or 0) - (self.allocated_quantity or 0)

from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from app.models.enums import AssetType, AssetStatus


class AssetCreate(BaseModel):
    name: str = Field(min_length=1)
    asset_code: str = Field(min_length=1)
    type: AssetType
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    room: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    purchase_price: Optional[float] = None
    document_urls: Optional[List[str]] = None
    allocated_to: Optional[UUID] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = None


class AssetUpdate(BaseModel):
    """Descriptive fields only; status and allocation move through their own flows."""
    name: Optional[str] = Field(default=None, min_length=1)
    asset_code: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    room: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    purchase_price: Optional[float] = None
    document_urls: Optional[List[str]] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = None

    class Config:
        extra = "forbid"


class AssetRead(BaseModel):
    id: UUID
    name: str
    asset_code: str
    type: AssetType
    status: AssetStatus
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    room: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    purchase_price: Optional[float] = None
    document_urls: Optional[List[str]] = None
    quantity: int
    allocated_quantity: int
    available_quantity: int
    min_stock_level: Optional[int] = None
    unit: Optional[str] = None
    registered_by: Optional[UUID] = None
    allocated_to: Optional[UUID] = None
    archived_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    url: str
    fileName: str

from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from app.models.enums import AssetStatus, AssetType, TransferStatus, TransferType

# Sentinel recipient meaning "back to departmental stock"
TO_STOCK = "STOCK"


class TransferCreate(BaseModel):
    asset_id: UUID
    # A user id, or "STOCK" / "" to hand the asset back to an officer
    to_user_id: str
    from_user_id: Optional[UUID] = None
    transfer_quantity: int = Field(default=1, ge=1)
    reason: Optional[str] = None
    notes: Optional[str] = None


class TransferRead(BaseModel):
    id: UUID
    asset_id: UUID
    from_user_id: Optional[UUID] = None
    to_user_id: UUID
    initiated_by: UUID
    transfer_quantity: int
    transfer_type: TransferType
    status: TransferStatus
    reason: Optional[str] = None
    notes: Optional[str] = None
    previous_asset_status: AssetStatus
    receipt_number: Optional[str] = None
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TransferUpdate(BaseModel):
    """Only the free-text fields of a pending transfer may change."""
    reason: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        extra = "forbid"


# ---------------------------------------------------------
# RECEIPT
# ---------------------------------------------------------
class ReceiptParty(BaseModel):
    id: UUID
    name: str
    email: str
    department: Optional[str] = None
    employee_id: Optional[str] = None

    class Config:
        from_attributes = True


class ReceiptAsset(BaseModel):
    id: UUID
    name: str
    asset_code: str
    type: AssetType
    category: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    location: Optional[str] = None
    room: Optional[str] = None

    class Config:
        from_attributes = True


class ReceiptDetails(BaseModel):
    receipt_number: str
    generated_at: Optional[datetime] = None
    transfer_date: Optional[datetime] = None
    transfer_type: TransferType
    status: TransferStatus


class TransferReceipt(BaseModel):
    receipt: ReceiptDetails
    asset: ReceiptAsset
    transfer_quantity: int
    from_user: Optional[ReceiptParty] = None
    to_user: Optional[ReceiptParty] = None
    initiated_by: Optional[ReceiptParty] = None
    approved_by: Optional[ReceiptParty] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from app.models.enums import ApprovalDecision, RequestStatus, ReturnCondition


class AssetRequestCreate(BaseModel):
    asset_id: UUID
    requested_quantity: int = Field(default=1, ge=1)
    purpose: Optional[str] = None
    notes: Optional[str] = None


class AssetRequestRead(BaseModel):
    id: UUID
    asset_id: UUID
    requested_by: UUID
    requested_quantity: int
    purpose: Optional[str] = None
    notes: Optional[str] = None
    status: RequestStatus
    issued_by: Optional[UUID] = None
    issuance_condition: Optional[str] = None
    issuance_notes: Optional[str] = None
    approved_at: Optional[datetime] = None
    issued_at: Optional[datetime] = None
    fulfilled_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None
    return_condition: Optional[ReturnCondition] = None
    return_notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DecisionRequest(BaseModel):
    """Body for approving or rejecting a request or a transfer."""
    status: ApprovalDecision
    comments: Optional[str] = None
    issuance_condition: Optional[str] = None
    issuance_notes: Optional[str] = None


class AssetRequestUpdate(BaseModel):
    purpose: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        extra = "forbid"


class ReturnVerification(BaseModel):
    verified_condition: ReturnCondition
    verification_notes: Optional[str] = None

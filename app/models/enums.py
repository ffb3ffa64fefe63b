from enum import Enum


class AssetType(str, Enum):
    EQUIPMENT = "EQUIPMENT"
    CONSUMABLE = "CONSUMABLE"
    TEACHING_AID = "TEACHING_AID"
    FURNITURE = "FURNITURE"
    OTHER = "OTHER"


class AssetStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    ALLOCATED = "ALLOCATED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    TRANSFER_PENDING = "TRANSFER_PENDING"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    # Approval issues the asset straight away
    FULFILLED = "FULFILLED"
    RETURNED = "RETURNED"


class ReturnCondition(str, Enum):
    FUNCTIONAL = "FUNCTIONAL"
    GOOD = "GOOD"
    FAIR = "FAIR"
    NEEDS_REPAIR = "NEEDS_REPAIR"
    DAMAGED = "DAMAGED"
    LOST = "LOST"


class MaintenanceType(str, Enum):
    PREVENTIVE = "PREVENTIVE"
    REPAIR = "REPAIR"
    CALIBRATION = "CALIBRATION"
    INSPECTION = "INSPECTION"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TransferStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TransferType(str, Enum):
    INTRA_DEPARTMENTAL = "INTRA_DEPARTMENTAL"
    INTER_DEPARTMENTAL = "INTER_DEPARTMENTAL"


class ApprovalDecision(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class NotificationType(str, Enum):
    REQUEST_APPROVED = "REQUEST_APPROVED"
    REQUEST_REJECTED = "REQUEST_REJECTED"
    ASSET_PENDING_APPROVAL = "ASSET_PENDING_APPROVAL"
    TRANSFER_PENDING = "TRANSFER_PENDING"
    TRANSFER_APPROVED = "TRANSFER_APPROVED"
    TRANSFER_REJECTED = "TRANSFER_REJECTED"
    STOCK_LOW = "STOCK_LOW"
    STOCK_OUT = "STOCK_OUT"
    RETURN_VERIFIED = "RETURN_VERIFIED"
    MAINTENANCE_DUE = "MAINTENANCE_DUE"

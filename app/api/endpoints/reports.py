# app/api/endpoints/reports.py

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import forbidden, get_db_session, require_permission, session_user_uuid
from app.core.errors import InvalidOperation
from app.core.permissions import Permission
from app.core.rbac import has_permission
from app.core.session import SessionUser
from app.models.user import UserRole
from app.schemas.asset import AssetRead
from app.schemas.asset_request import AssetRequestRead
from app.schemas.transfer import TransferRead
from app.services import dashboard_service
from app.services.asset_service import list_assets
from app.services.request_service import list_requests
from app.services.transfer_service import list_transfers

router = APIRouter(prefix="/api/reports", tags=["Reports"])

REPORT_TYPES = ("summary", "assets", "requests", "transfers")

require_report_reader = require_permission(
    Permission.VIEW_REPORTS,
    Permission.GENERATE_REPORTS,
    any_of=True,
)


@router.get("")
async def get_report(
    type: str = Query("summary"),
    session: AsyncSession = Depends(get_db_session),
    current: SessionUser = Depends(require_report_reader),
):
    if type not in REPORT_TYPES:
        raise InvalidOperation("Invalid report type")
    if type == "summary":
        return await dashboard_service.report_summary(session)

    # Full listings are generated reports; viewers only get the summary
    if not has_permission(current.role, Permission.GENERATE_REPORTS):
        raise forbidden()

    user_id = session_user_uuid(current)
    if type == "assets":
        rows = await list_assets(session, UserRole.FACULTY_ADMIN, user_id)
        return [AssetRead.model_validate(row) for row in rows]
    if type == "requests":
        rows = await list_requests(session, UserRole.FACULTY_ADMIN, user_id)
        return [AssetRequestRead.model_validate(row) for row in rows]
    rows = await list_transfers(session, UserRole.FACULTY_ADMIN, user_id)
    return [TransferRead.model_validate(row) for row in rows]

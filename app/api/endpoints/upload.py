# app/api/endpoints/upload.py

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from loguru import logger

from app.api.deps import forbidden, get_current_session, session_user_uuid
from app.core.permissions import Permission
from app.core.rbac import has_permission
from app.core.session import SessionUser
from app.core.storage import UploadRejected, read_validated_upload, store_upload
from app.schemas.asset import UploadResponse
from app.services.activity_service import log_activity

router = APIRouter(prefix="/api/upload", tags=["Uploads"])


@router.post("", response_model=UploadResponse)
async def upload_document(
    request: Request,
    file: Optional[UploadFile] = File(None),
    current: SessionUser = Depends(get_current_session),
):
    """
    Stores an asset document. The file is validated before the role is
    checked, so an unacceptable file is a 400 for every caller.
    """
    if file is None or not file.filename:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "No file provided")

    try:
        content = await read_validated_upload(file)
    except UploadRejected as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))

    if not has_permission(current.role, Permission.REGISTER_ASSETS):
        logger.info(f"Upload denied for role {current.role.value}")
        raise forbidden()

    try:
        url = await store_upload(content, file.filename, file.content_type)
    except Exception:
        logger.exception(f"Storing upload {file.filename!r} failed")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload file")

    await log_activity(
        action="UPLOAD",
        entity_type="Document",
        description=f"Uploaded {file.filename}",
        details={"url": url, "content_type": file.content_type, "size": len(content)},
        user_id=session_user_uuid(current),
        request=request,
    )
    return UploadResponse(url=url, fileName=file.filename)

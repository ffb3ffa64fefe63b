# app/core/storage.py

import mimetypes
import os
import uuid
from pathlib import Path

from fastapi import UploadFile
from loguru import logger
from supabase import create_client, Client

from app.core.config import settings

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

MAX_FILE_SIZE = settings.MAX_UPLOAD_SIZE
PUBLIC_PREFIX = "/uploads"


class UploadRejected(ValueError):
    """The file itself is unacceptable (type or size). Maps to HTTP 400."""


# Supabase client (only when that backend is selected)
supabase: Client | None = None
if settings.STORAGE_BACKEND == "supabase":
    try:
        supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Supabase init failed: {e}")
        supabase = None


def _megabytes(size: int) -> int:
    return size // (1024 * 1024)


async def read_validated_upload(file: UploadFile, max_size: int = MAX_FILE_SIZE) -> bytes:
    """
    Checks the declared type and the real size, returns the file content.
    Never reads more than one byte past the cap.
    """
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadRejected("Invalid file type")

    too_large = UploadRejected(f"File size exceeds {_megabytes(max_size)}MB")
    if file.size is not None and file.size > max_size:
        raise too_large

    content = await file.read(max_size + 1)
    if len(content) > max_size:
        raise too_large

    await file.seek(0)
    return content


def make_storage_name(original_name: str | None, content_type: str | None) -> str:
    """
    The user's filename is never trusted; only its extension survives.
    """
    ext = os.path.splitext(original_name or "")[1].lower()
    if not ext or len(ext) > 8:
        ext = mimetypes.guess_extension(content_type or "") or ""
    return f"{uuid.uuid4()}{ext}"


def _save_local(name: str, content: bytes) -> str:
    target_dir = Path(settings.UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / name).write_bytes(content)
    return f"{PUBLIC_PREFIX}/{name}"


def _save_supabase(name: str, content: bytes, content_type: str) -> str:
    if not supabase:
        raise RuntimeError("Supabase storage is not configured")

    supabase.storage.from_(settings.SUPABASE_BUCKET).upload(
        path=name,
        file=content,
        file_options={"content-type": content_type, "upsert": "true"},
    )
    return supabase.storage.from_(settings.SUPABASE_BUCKET).get_public_url(name)


async def store_upload(content: bytes, original_name: str | None, content_type: str) -> str:
    """
    Persists an already validated file and returns the URL it is served from.
    Any backend error propagates; the endpoint maps it to a 500.
    """
    name = make_storage_name(original_name, content_type)
    if settings.STORAGE_BACKEND == "supabase":
        return _save_supabase(name, content, content_type)
    return _save_local(name, content)

"""Multipart upload endpoints backed by local-disk storage."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.deps import get_current_user, require_admin, require_csrf_header
from app.core.errors import bad_request
from app.db.models import User
from app.services import storage_service
from app.utils.file_upload import (
    content_length_exceeds_limit,
    is_image,
    is_pdf_or_image,
    read_validated_upload,
)

router = APIRouter(prefix="/api", tags=["Uploads"])


def _reject_oversized(request: Request, max_size_bytes: int) -> None:
    if content_length_exceeds_limit(
        request.headers.get("content-length"), max_size_bytes=max_size_bytes
    ):
        raise bad_request(f"File too large (max {max_size_bytes // (1024 * 1024)}MB)")


@router.post("/upload-avatar", dependencies=[Depends(require_csrf_header)])
async def upload_avatar(
    request: Request,
    file: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
):
    """Store an avatar image (max 2MB) and return its URL."""
    _reject_oversized(request, settings.AVATAR_MAX_BYTES)
    data = await read_validated_upload(
        file,
        max_size_bytes=settings.AVATAR_MAX_BYTES,
        allowed=is_image,
        type_error="Only image files are allowed",
    )
    key = storage_service.avatar_key(user.id, file.filename)
    stored = await run_in_threadpool(storage_service.storage_put, key, data)
    return {"url": stored.url}


@router.post("/upload-employee-document", dependencies=[Depends(require_csrf_header)])
async def upload_employee_document(
    request: Request,
    file: UploadFile | None = File(None),
    doc_type: str | None = Form(None),
    admin: User = Depends(require_admin),
):
    """Store an employee document (PDF or image, max 8MB) and return its URL."""
    _reject_oversized(request, settings.DOCUMENT_MAX_BYTES)
    data = await read_validated_upload(
        file,
        max_size_bytes=settings.DOCUMENT_MAX_BYTES,
        allowed=is_pdf_or_image,
        type_error="Only PDF or image files are allowed",
    )
    key = storage_service.employee_document_key(admin.id, doc_type, file.filename)
    stored = await run_in_threadpool(storage_service.storage_put, key, data)
    return {"url": stored.url}

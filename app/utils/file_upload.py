"""Helpers for validating multipart uploads."""

from __future__ import annotations

from os import SEEK_END

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.errors import bad_request


MULTIPART_OVERHEAD_BYTES = 64 * 1024


def content_length_exceeds_limit(
    content_length_header: str | None,
    *,
    max_size_bytes: int,
    overhead_bytes: int = MULTIPART_OVERHEAD_BYTES,
) -> bool:
    """Return True when Content-Length clearly exceeds the allowed file size."""
    if not content_length_header:
        return False
    try:
        content_length = int(content_length_header)
    except (TypeError, ValueError):
        return False
    return content_length > (max_size_bytes + overhead_bytes)


async def get_upload_file_size(file: UploadFile) -> int:
    """Read size from the underlying file object without loading into memory."""

    def _get_size() -> int:
        stream = file.file
        original_pos = stream.tell()
        try:
            stream.seek(0, SEEK_END)
            return stream.tell()
        finally:
            stream.seek(original_pos)

    return await run_in_threadpool(_get_size)


def is_image(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def is_pdf_or_image(content_type: str | None) -> bool:
    return content_type == "application/pdf" or is_image(content_type)


async def read_validated_upload(
    file: UploadFile | None,
    *,
    max_size_bytes: int,
    allowed,
    type_error: str,
) -> bytes:
    """
    Check presence, content type and size, then read the upload.

    Raises:
        ProcedureError BAD_REQUEST: missing file, wrong type or too large
    """
    if file is None or not file.filename:
        raise bad_request("No file uploaded")
    if not allowed(file.content_type):
        raise bad_request(type_error)
    if await get_upload_file_size(file) > max_size_bytes:
        raise bad_request(f"File too large (max {max_size_bytes // (1024 * 1024)}MB)")
    return await file.read()

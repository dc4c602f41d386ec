"""Local-disk upload storage served under /uploads."""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from app.core.config import settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

_UNSAFE_DOC_TYPE = re.compile(r"[^a-z0-9_-]")
_UNSAFE_EXT = re.compile(r"[^a-z0-9]")


@dataclass
class StoredFile:
    key: str
    url: str


def uploads_root() -> Path:
    return Path(settings.UPLOADS_DIR).resolve()


def normalize_key(rel_key: str) -> str:
    return rel_key.replace("\\", "/").lstrip("/")


def file_extension(filename: str | None, default: str = "bin") -> str:
    """Lower-cased, alphanumeric-only extension of an uploaded file name."""
    if not filename or "." not in filename:
        return default
    ext = _UNSAFE_EXT.sub("", filename.rsplit(".", 1)[-1].lower())
    return ext or default


def sanitize_doc_type(doc_type: str | None) -> str:
    safe = _UNSAFE_DOC_TYPE.sub("", (doc_type or "").lower())
    return safe or "document"


def storage_put(rel_key: str, data: bytes) -> StoredFile:
    """Write bytes under UPLOADS_DIR and return the public URL."""
    key = normalize_key(rel_key)
    root = uploads_root()
    path = (root / key).resolve()
    if root not in path.parents:
        raise ValueError(f"Upload key escapes storage root: {rel_key}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Stored upload key=%s bytes=%d", key, len(data))
    return StoredFile(key=key, url=f"{URL_PREFIX}/{key}")


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def avatar_key(user_id: UUID, filename: str | None) -> str:
    return f"avatars/{user_id}-{_timestamp_ms()}.{file_extension(filename, 'png')}"


def employee_document_key(uploader_id: UUID, doc_type: str | None, filename: str | None) -> str:
    safe_type = sanitize_doc_type(doc_type)
    return (
        f"employee-documents/{uploader_id}-{safe_type}-{_timestamp_ms()}"
        f".{file_extension(filename)}"
    )

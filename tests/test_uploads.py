"""Tests for avatar and employee document uploads."""

from pathlib import Path

import pytest
from httpx import AsyncClient

from app.services import storage_service
from app.utils.file_upload import content_length_exceeds_limit, is_image, is_pdf_or_image


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_content_type_checks():
    assert is_image("image/png")
    assert not is_image("application/pdf")
    assert not is_image(None)
    assert is_pdf_or_image("application/pdf")
    assert is_pdf_or_image("image/jpeg")
    assert not is_pdf_or_image("text/plain")


def test_content_length_limit():
    assert content_length_exceeds_limit(None, max_size_bytes=10) is False
    assert content_length_exceeds_limit("nope", max_size_bytes=10) is False
    assert content_length_exceeds_limit("100", max_size_bytes=10, overhead_bytes=0) is True
    assert content_length_exceeds_limit("10", max_size_bytes=10, overhead_bytes=0) is False


def test_storage_keys_are_sanitized():
    assert storage_service.file_extension("photo.JPG") == "jpg"
    assert storage_service.file_extension("noext", "png") == "png"
    assert storage_service.file_extension("evil.p/h.p") == "p"
    assert storage_service.sanitize_doc_type("../Offer Letter") == "offerletter"
    assert storage_service.sanitize_doc_type(None) == "document"


def test_storage_rejects_escaping_keys():
    with pytest.raises(ValueError):
        storage_service.storage_put("../../outside.txt", b"x")


@pytest.mark.asyncio
async def test_upload_avatar(authed_client: AsyncClient, test_user):
    response = await authed_client.post(
        "/api/upload-avatar",
        files={"file": ("me.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith(f"/uploads/avatars/{test_user.id}-")
    assert url.endswith(".png")

    stored = Path(storage_service.uploads_root(), url.removeprefix("/uploads/"))
    assert stored.read_bytes() == PNG_BYTES

    served = await authed_client.get(url)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


@pytest.mark.asyncio
async def test_upload_avatar_rejects_non_images(authed_client: AsyncClient):
    response = await authed_client.post(
        "/api/upload-avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Only image files are allowed", "code": "BAD_REQUEST"}


@pytest.mark.asyncio
async def test_upload_avatar_rejects_large_files(authed_client: AsyncClient):
    response = await authed_client.post(
        "/api/upload-avatar",
        files={"file": ("big.png", b"\x00" * (2 * 1024 * 1024 + 1), "image/png")},
    )

    assert response.status_code == 400
    assert "File too large" in response.json()["detail"]


@pytest.mark.asyncio
async def test_upload_avatar_requires_file(authed_client: AsyncClient):
    response = await authed_client.post("/api/upload-avatar", data={"other": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


@pytest.mark.asyncio
async def test_upload_avatar_requires_session(client: AsyncClient):
    response = await client.post(
        "/api/upload-avatar",
        files={"file": ("me.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_upload_employee_document(admin_client: AsyncClient, test_admin):
    response = await admin_client.post(
        "/api/upload-employee-document",
        files={"file": ("offer.pdf", b"%PDF-1.4 test", "application/pdf")},
        data={"doc_type": "offer_letter"},
    )

    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith(f"/uploads/employee-documents/{test_admin.id}-offer_letter-")
    assert url.endswith(".pdf")


@pytest.mark.asyncio
async def test_upload_employee_document_admin_only(authed_client: AsyncClient):
    response = await authed_client.post(
        "/api/upload-employee-document",
        files={"file": ("offer.pdf", b"%PDF-1.4 test", "application/pdf")},
        data={"doc_type": "offer_letter"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_upload_employee_document_rejects_other_types(admin_client: AsyncClient):
    response = await admin_client.post(
        "/api/upload-employee-document",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Only PDF or image files are allowed"

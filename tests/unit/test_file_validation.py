"""Unit tests de validación de archivos y del pipeline de subida."""

import pytest

from app.application.file_validation import validate_file
from app.application.interfaces.clock import FakeClock
from app.application.uploads import (
    CUSTOMER_DOCUMENTS,
    build_file_key,
    compensate_on_error,
    sanitize_file_name,
    upload_file,
)
from app.infrastructure.in_memory.object_storage import InMemoryObjectStorage


class TestValidateFile:
    def test_accepts_pdf_and_images(self):
        for content_type in ("application/pdf", "image/jpeg", "image/png", "image/webp"):
            assert validate_file(content_type, 1024).valid, content_type

    def test_content_type_matches_by_substring(self):
        assert validate_file("image/png; charset=binary", 10).valid

    def test_rejects_executables(self):
        result = validate_file("application/x-msdownload", 10)
        assert not result.valid
        assert "File type not allowed" in result.error

    def test_size_limit_is_inclusive(self):
        limit = 10 * 1024 * 1024
        assert validate_file("application/pdf", limit).valid
        result = validate_file("application/pdf", limit + 1)
        assert not result.valid
        assert result.error == "File too large. Maximum size: 10MB"

    def test_custom_limits(self):
        assert not validate_file("application/pdf", 2 * 1024 * 1024, max_size_mb=1).valid
        assert not validate_file("image/png", 10, allowed_types=("application/pdf",)).valid


class TestUploads:
    def test_sanitize_replaces_unsafe_characters(self):
        assert sanitize_file_name("my doc (1).pdf") == "my_doc__1_.pdf"
        assert sanitize_file_name("../../etc/passwd") == ".._.._etc_passwd"

    def test_file_key_layout(self):
        key = build_file_key(CUSTOMER_DOCUMENTS, 42, "id card.pdf", FakeClock())
        category, owner, name = key.split("/")
        assert category == "customer-documents"
        assert owner == "42"
        millis, token, safe_name = name.split("-", 2)
        assert millis.isdigit()
        assert len(token) == 16
        assert safe_name == "id_card.pdf"

    async def test_upload_stores_object(self):
        storage = InMemoryObjectStorage()
        uploaded = await upload_file(storage, b"abc", 5, CUSTOMER_DOCUMENTS, "a.pdf", "application/pdf", FakeClock())

        assert uploaded.size == 3
        assert uploaded.file_url == f"memory://uploads/{uploaded.file_key}"
        assert storage.objects[uploaded.file_key].data == b"abc"

    async def test_upload_returns_sanitized_name(self):
        storage = InMemoryObjectStorage()
        uploaded = await upload_file(
            storage, b"abc", 5, CUSTOMER_DOCUMENTS, "my id (front).pdf", "application/pdf", FakeClock()
        )

        assert uploaded.file_name == "my_id__front_.pdf"

    async def test_failed_database_write_deletes_object(self):
        storage = InMemoryObjectStorage()
        uploaded = await upload_file(storage, b"abc", 5, CUSTOMER_DOCUMENTS, "a.pdf", "application/pdf")

        with pytest.raises(RuntimeError):
            async with compensate_on_error(storage, uploaded.file_key):
                raise RuntimeError("insert failed")

        assert uploaded.file_key not in storage.objects
        assert storage.deleted == [uploaded.file_key]

    async def test_successful_write_keeps_object(self):
        storage = InMemoryObjectStorage()
        uploaded = await upload_file(storage, b"abc", 5, CUSTOMER_DOCUMENTS, "a.pdf", "application/pdf")

        async with compensate_on_error(storage, uploaded.file_key):
            pass

        assert uploaded.file_key in storage.objects
        assert storage.deleted == []

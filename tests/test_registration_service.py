"""
Integration tests — sponsor registration submission (registration_service.py)
and the directory-backed logo storage (storage_service.py).

Coverage:
  - draft → row mapping
  - logo object key format
  - no-logo submit inserts one row with a NULL logo
  - upload failure stops before the insert
  - insert failure and unexpected errors surface as user-facing messages
  - LocalFileStorage writes, refuses overwrites and path traversal
"""
from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from expo_bot.models.models import Registration, RegistrationStatus
from expo_bot.services.draft_service import LogoFile, RegistrationDraft, SocialMedia
from expo_bot.services.registration_service import (
    UNKNOWN_ERROR,
    RegistrationSubmitter,
    build_registration_payload,
    count_registrations,
    list_recent_registrations,
    logo_object_key,
    submit_registration,
)
from expo_bot.services.storage_service import LocalFileStorage, StorageError


def _draft(**overrides) -> RegistrationDraft:
    fields = dict(
        company_name="Acme Ltd",
        company_website="https://acme.co.ke",
        country="Kenya",
        organization_type="corporation",
        full_name="Jane Wanjiru",
        job_title="CEO",
        email="jane@acme.co.ke",
        phone="+254712345678",
        package="gold-id",
        delegate_count=2,
        delegate_names=["Jane Wanjiru", "Peter Otieno"],
        fascia_name="ACME",
        social_media=SocialMedia(twitter="@acme"),
        payment_method="bank",
        terms_accepted=True,
        consent_given=True,
    )
    fields.update(overrides)
    return RegistrationDraft().update(**fields)


async def _row_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(Registration))


# ─────────────────────────── Payload ──────────────────────────────────────────

class TestPayload:

    def test_field_mapping(self) -> None:
        payload = build_registration_payload(_draft(), "1700000000000.png")
        assert payload["contact_name"] == "Jane Wanjiru"
        assert payload["contact_job_title"] == "CEO"
        assert payload["contact_email"] == "jane@acme.co.ke"
        assert payload["contact_phone"] == "+254712345678"
        assert payload["package_id"] == "gold-id"
        assert payload["company_logo_url"] == "1700000000000.png"
        assert payload["delegate_names"] == ["Jane Wanjiru", "Peter Otieno"]
        assert payload["social_media"] == {
            "twitter": "@acme", "facebook": "", "linkedin": "", "instagram": "",
        }

    def test_draft_only_fields_not_in_payload(self) -> None:
        payload = build_registration_payload(_draft(), None)
        assert "company_logo" not in payload
        assert "full_name" not in payload
        assert "status" not in payload

    def test_logo_key_uses_timestamp_and_extension(self) -> None:
        logo = LogoFile(name="Acme Logo.final.PNG", content=b"")
        assert logo_object_key(logo, now_ms=1700000000123) == "1700000000123.PNG"

    def test_logo_key_defaults_to_now(self) -> None:
        key = logo_object_key(LogoFile(name="logo.svg", content=b""))
        stamp, ext = key.split(".")
        assert ext == "svg"
        assert stamp.isdigit() and len(stamp) >= 13


# ─────────────────────────── Submit ───────────────────────────────────────────

class TestSubmit:

    async def test_without_logo_inserts_once(self, async_session, memory_storage) -> None:
        result = await submit_registration(async_session, memory_storage, _draft())
        assert result.success
        assert result.error is None
        assert result.data["company_logo_url"] is None
        assert result.data["status"] == RegistrationStatus.PENDING
        assert memory_storage.objects == {}
        assert await _row_count(async_session) == 1

    async def test_with_logo_uploads_then_inserts(self, async_session, memory_storage) -> None:
        draft = _draft(company_logo=LogoFile(name="logo.png", content=b"\x89PNG"))
        submitter = RegistrationSubmitter(async_session, memory_storage, bucket="company-logos")
        result = await submitter.submit(draft)
        assert result.success
        ((bucket, key), content), = memory_storage.objects.items()
        assert bucket == "company-logos"
        assert key.endswith(".png")
        assert content == b"\x89PNG"
        assert result.data["company_logo_url"] == key

    async def test_upload_failure_skips_insert(self, async_session, failing_storage) -> None:
        draft = _draft(company_logo=LogoFile(name="logo.png", content=b"x"))
        submitter = RegistrationSubmitter(async_session, failing_storage)
        result = await submitter.submit(draft)
        assert not result.success
        assert result.error == "Error uploading logo: Bucket not found"
        assert submitter.error == result.error
        assert failing_storage.calls == 1
        assert await _row_count(async_session) == 0

    async def test_insert_failure_message(self, async_session, memory_storage) -> None:
        error = IntegrityError("INSERT", {}, Exception("duplicate key"))
        with patch(
            "expo_bot.services.registration_service.insert_registration",
            AsyncMock(side_effect=error),
        ):
            result = await submit_registration(async_session, memory_storage, _draft())
        assert not result.success
        assert result.error == "Error submitting registration: duplicate key"

    async def test_any_upload_exception_is_reported_as_upload_error(
        self, async_session, failing_storage_factory,
    ) -> None:
        storage = failing_storage_factory("Bucket not found", exc_type=ConnectionError)
        draft = _draft(company_logo=LogoFile(name="logo.png", content=b"x"))
        result = await submit_registration(async_session, storage, draft)
        assert not result.success
        assert result.error == "Error uploading logo: Bucket not found"
        assert await _row_count(async_session) == 0

    async def test_non_database_insert_error_keeps_message(self, async_session, memory_storage) -> None:
        with patch(
            "expo_bot.services.registration_service.insert_registration",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            result = await submit_registration(async_session, memory_storage, _draft())
        assert result.error == "Error submitting registration: boom"

    async def test_error_without_message_is_generic(self, async_session, memory_storage) -> None:
        with patch(
            "expo_bot.services.registration_service.insert_registration",
            AsyncMock(side_effect=RuntimeError()),
        ):
            result = await submit_registration(async_session, memory_storage, _draft())
        assert result.error == UNKNOWN_ERROR

    async def test_upload_error_without_message_is_generic(
        self, async_session, failing_storage_factory,
    ) -> None:
        storage = failing_storage_factory("", exc_type=OSError)
        draft = _draft(company_logo=LogoFile(name="logo.png", content=b"x"))
        result = await submit_registration(async_session, storage, draft)
        assert result.error == UNKNOWN_ERROR
        assert await _row_count(async_session) == 0

    async def test_loading_flag_cleared(self, async_session, failing_storage) -> None:
        submitter = RegistrationSubmitter(async_session, failing_storage)
        assert submitter.is_loading is False
        await submitter.submit(_draft(company_logo=LogoFile(name="a.png", content=b"")))
        assert submitter.is_loading is False

    async def test_retry_after_failure_succeeds(self, async_session, memory_storage) -> None:
        submitter = RegistrationSubmitter(async_session, memory_storage)
        with patch(
            "expo_bot.services.registration_service.insert_registration",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            assert not (await submitter.submit(_draft())).success
        result = await submitter.submit(_draft())
        assert result.success
        assert submitter.error is None


# ─────────────────────────── Admin queries ────────────────────────────────────

class TestAdminQueries:

    async def test_recent_and_count(self, async_session, memory_storage) -> None:
        for name in ("Acme", "Globex", "Initech"):
            await submit_registration(async_session, memory_storage, _draft(company_name=name))
        assert await count_registrations(async_session) == 3
        recent = await list_recent_registrations(async_session, limit=2)
        assert [r.company_name for r in recent] == ["Initech", "Globex"]


# ─────────────────────────── LocalFileStorage ─────────────────────────────────

class TestLocalFileStorage:

    async def test_upload_writes_file(self, tmp_path) -> None:
        storage = LocalFileStorage(tmp_path)
        stored = await storage.upload("company-logos", "123.png", b"data")
        assert stored.path == "123.png"
        assert (tmp_path / "company-logos" / "123.png").read_bytes() == b"data"

    async def test_existing_key_not_overwritten(self, tmp_path) -> None:
        storage = LocalFileStorage(tmp_path)
        await storage.upload("company-logos", "123.png", b"first")
        with pytest.raises(StorageError, match="already exists"):
            await storage.upload("company-logos", "123.png", b"second")
        assert (tmp_path / "company-logos" / "123.png").read_bytes() == b"first"

    async def test_path_traversal_rejected(self, tmp_path) -> None:
        storage = LocalFileStorage(tmp_path)
        with pytest.raises(StorageError):
            await storage.upload("company-logos", "../escape.png", b"x")

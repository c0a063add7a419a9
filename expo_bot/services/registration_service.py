"""
Sponsor registration submission.

Order of operations for one submit:
  1. upload the company logo (if any) to the logos bucket
  2. build the `registrations` row from the draft
  3. insert the row and read it back

Upload and insert are not atomic: when the insert fails the uploaded logo
stays in storage.  Nothing is retried automatically; the user may submit
again, which re-runs all three steps.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.config import settings
from expo_bot.models.models import Registration
from expo_bot.services.draft_service import LogoFile, RegistrationDraft
from expo_bot.services.storage_service import FileStorage

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


class SubmissionError(Exception):
    """A failed pipeline step; the message is already user-facing."""


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    error: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> "SubmissionResult":
        return cls(success=True, error=None, data=data)

    @classmethod
    def failed(cls, error: str) -> "SubmissionResult":
        return cls(success=False, error=error, data=None)


def logo_object_key(logo: LogoFile, now_ms: Optional[int] = None) -> str:
    """`<epoch millis>.<ext>` — the original file name is not kept."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}.{logo.extension}"


def build_registration_payload(
    draft: RegistrationDraft,
    logo_path: Optional[str],
) -> dict[str, Any]:
    """Map draft fields to `registrations` columns."""
    return {
        "company_name":      draft.company_name,
        "company_website":   draft.company_website,
        "country":           draft.country,
        "organization_type": draft.organization_type,
        "company_logo_url":  logo_path,

        "contact_name":      draft.full_name,
        "contact_job_title": draft.job_title,
        "contact_email":     draft.email,
        "contact_phone":     draft.phone,

        "package_id":        draft.package,

        "delegate_count":    draft.delegate_count,
        "delegate_names":    list(draft.delegate_names),

        "fascia_name":       draft.fascia_name,
        "social_media":      draft.social_media.model_dump(),

        "payment_method":    draft.payment_method,

        "terms_accepted":    draft.terms_accepted,
        "consent_given":     draft.consent_given,
    }


async def insert_registration(session: AsyncSession, payload: dict[str, Any]) -> dict[str, Any]:
    """Insert exactly one row and return it as stored (id, defaults included)."""
    row = Registration(**payload)
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row.as_dict()


class RegistrationSubmitter:
    """
    Runs the submission sequence for one user session.

    `is_loading` is True while a submit is in flight and is only visible to
    callers holding the instance.  `submit_registration` and the sponsor
    wizard build a fresh submitter per call, so the wizard guards duplicate
    presses with its own FSM flag.  Concurrent calls are not blocked here.
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: FileStorage,
        bucket: Optional[str] = None,
    ) -> None:
        self.session = session
        self.storage = storage
        self.bucket = bucket or settings.LOGO_BUCKET
        self.is_loading = False
        self.error: Optional[str] = None

    async def _upload_logo(self, logo: LogoFile) -> str:
        key = logo_object_key(logo)
        try:
            stored = await self.storage.upload(self.bucket, key, logo.content)
        except Exception as exc:
            if not str(exc):
                raise
            raise SubmissionError(f"Error uploading logo: {exc}") from exc
        return stored.path

    async def _insert(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return await insert_registration(self.session, payload)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            detail = getattr(exc, "orig", None) or exc
            raise SubmissionError(f"Error submitting registration: {detail}") from exc
        except Exception as exc:
            await self.session.rollback()
            if not str(exc):
                raise
            raise SubmissionError(f"Error submitting registration: {exc}") from exc

    async def submit(self, draft: RegistrationDraft) -> SubmissionResult:
        self.is_loading = True
        self.error = None
        try:
            logo_path = None
            if draft.company_logo is not None:
                logo_path = await self._upload_logo(draft.company_logo)

            payload = build_registration_payload(draft, logo_path)
            row = await self._insert(payload)
            logger.info(
                "Sponsor registration #%s stored (%s, package %s)",
                row.get("id"), row.get("company_name"), row.get("package_id"),
            )
            return SubmissionResult.ok(row)
        except SubmissionError as exc:
            logger.warning("Registration submit failed: %s", exc)
            self.error = str(exc)
            return SubmissionResult.failed(self.error)
        except Exception:
            logger.exception("Unexpected error while submitting registration")
            self.error = UNKNOWN_ERROR
            return SubmissionResult.failed(self.error)
        finally:
            self.is_loading = False


async def submit_registration(
    session: AsyncSession,
    storage: FileStorage,
    draft: RegistrationDraft,
) -> SubmissionResult:
    return await RegistrationSubmitter(session, storage).submit(draft)


# ── Admin queries ─────────────────────────────────────────────────────────────

async def list_recent_registrations(session: AsyncSession, limit: int = 10) -> list[Registration]:
    result = await session.execute(
        select(Registration).order_by(Registration.created_at.desc(), Registration.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def count_registrations(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(Registration)) or 0

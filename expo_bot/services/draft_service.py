"""
Sponsor registration draft — the state accumulated across wizard steps.

The draft is a pydantic model that is replaced (never mutated in place) on
every edit: `update()` performs a shallow merge, so nested objects such as
`social_media` are swapped as a whole when given.  The aggregator owns the
draft plus the current step index and is round-tripped through FSM storage
between Telegram updates.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from aiogram.fsm.context import FSMContext
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# FSM data key holding the serialized aggregator
DRAFT_KEY = "sponsor_draft"

WIZARD_STEPS: list[tuple[str, str]] = [
    ("company",   "Company Details"),
    ("contact",   "Contact Person"),
    ("package",   "Sponsorship Package"),
    ("delegates", "Delegate Information"),
    ("branding",  "Branding & Booth"),
    ("payment",   "Payment Info"),
    ("terms",     "Terms & Submit"),
]
STEP_IDS = [step_id for step_id, _ in WIZARD_STEPS]


class LogoFile(BaseModel):
    """Uploaded company logo held in memory until submission."""
    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        # Same rule as name.split('.').pop(): no dot → whole name
        return self.name.rsplit(".", 1)[-1]


class SocialMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    twitter: str = ""
    facebook: str = ""
    linkedin: str = ""
    instagram: str = ""


class RegistrationDraft(BaseModel):
    """In-progress sponsor registration."""
    model_config = ConfigDict(frozen=True)

    # Company details
    company_name: str = ""
    company_website: str = ""
    country: str = ""
    organization_type: str = ""
    company_logo: Optional[LogoFile] = None

    # Contact person
    full_name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""

    # Sponsorship package
    package: str = ""

    # Delegates: delegate_count always equals len(delegate_names)
    delegate_count: int = 1
    delegate_names: tuple[str, ...] = ("",)

    # Branding
    fascia_name: str = ""
    social_media: SocialMedia = Field(default_factory=SocialMedia)

    # Payment
    payment_method: str = ""

    # Terms
    terms_accepted: bool = False
    consent_given: bool = False

    def update(self, **fields: Any) -> "RegistrationDraft":
        """
        Shallow merge: given fields replace their current value, everything
        else is kept.  No validation happens here.
        """
        unknown = set(fields) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"Unknown draft field(s): {', '.join(sorted(unknown))}")
        if "delegate_names" in fields:
            fields["delegate_names"] = tuple(fields["delegate_names"])
        if isinstance(fields.get("social_media"), dict):
            fields["social_media"] = SocialMedia(**fields["social_media"])
        if isinstance(fields.get("company_logo"), dict):
            fields["company_logo"] = LogoFile(**fields["company_logo"])
        return self.model_copy(update=fields)


class DraftAggregator:
    """
    Owns one RegistrationDraft and the wizard position.

    Handlers never touch the draft directly; they call `update()` or one of
    the delegate helpers and persist the aggregator back into FSM storage.
    """

    def __init__(self, draft: Optional[RegistrationDraft] = None, step: int = 0) -> None:
        self.draft = draft or RegistrationDraft()
        self.step = step

    # ── Field edits ───────────────────────────────────────────────────────────

    def update(self, **fields: Any) -> RegistrationDraft:
        self.draft = self.draft.update(**fields)
        return self.draft

    # ── Navigation ────────────────────────────────────────────────────────────

    @property
    def step_id(self) -> str:
        return STEP_IDS[self.step]

    @property
    def is_last_step(self) -> bool:
        return self.step == len(STEP_IDS) - 1

    def next_step(self) -> bool:
        if self.step < len(STEP_IDS) - 1:
            self.step += 1
            return True
        return False

    def back_step(self) -> bool:
        if self.step > 0:
            self.step -= 1
            return True
        return False

    def go_to(self, step_id: str) -> None:
        self.step = STEP_IDS.index(step_id)

    def validate_step(self, step_id: Optional[str] = None) -> bool:
        """Required fields of a single step are filled in."""
        d = self.draft
        sid = step_id or self.step_id
        if sid == "company":
            return bool(d.company_name and d.country and d.organization_type)
        if sid == "contact":
            return bool(d.full_name and d.job_title and d.email and d.phone)
        if sid == "package":
            return bool(d.package)
        if sid == "delegates":
            return all(name.strip() for name in d.delegate_names)
        if sid == "branding":
            return bool(d.fascia_name)
        if sid == "payment":
            return bool(d.payment_method)
        if sid == "terms":
            return d.terms_accepted and d.consent_given
        return True

    def first_incomplete_step(self) -> Optional[str]:
        for sid in STEP_IDS:
            if not self.validate_step(sid):
                return sid
        return None

    # ── Delegates ─────────────────────────────────────────────────────────────

    def add_delegate(self) -> bool:
        names = self.draft.delegate_names + ("",)
        self.update(delegate_count=len(names), delegate_names=names)
        return True

    def remove_delegate(self, index: int) -> bool:
        """Drop the delegate at `index`; the list closes the gap. At least one stays."""
        names = self.draft.delegate_names
        if not 0 <= index < len(names) or len(names) <= 1:
            return False
        remaining = names[:index] + names[index + 1:]
        self.update(delegate_count=len(remaining), delegate_names=remaining)
        return True

    def decrement_delegates(self) -> bool:
        if self.draft.delegate_count <= 1:
            return False
        names = self.draft.delegate_names[:-1]
        self.update(delegate_count=len(names), delegate_names=names)
        return True

    def set_delegate_name(self, index: int, name: str) -> bool:
        names = list(self.draft.delegate_names)
        if not 0 <= index < len(names):
            return False
        names[index] = name.strip()
        self.update(delegate_names=names)
        return True


# ── FSM storage round-trip ────────────────────────────────────────────────────

def dump_aggregator(aggregator: DraftAggregator) -> dict[str, Any]:
    return {"step": aggregator.step, "draft": aggregator.draft.model_dump()}


def load_aggregator(data: Optional[dict[str, Any]]) -> DraftAggregator:
    if not data:
        return DraftAggregator()
    return DraftAggregator(
        draft=RegistrationDraft.model_validate(data.get("draft", {})),
        step=int(data.get("step", 0)),
    )


async def get_aggregator(state: FSMContext) -> DraftAggregator:
    data = await state.get_data()
    return load_aggregator(data.get(DRAFT_KEY))


async def save_aggregator(state: FSMContext, aggregator: DraftAggregator) -> None:
    await state.update_data({DRAFT_KEY: dump_aggregator(aggregator)})

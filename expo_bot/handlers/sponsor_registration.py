"""
Sponsor registration wizard.

Flow (one section per wizard step):
  company  : name → website → country → organization type → logo
  contact  : full name → job title → email → phone
  package  : choose from the active catalog
  delegates: list editor (➕ / ➖ / rename / remove)
  branding : fascia name (≤25 chars) → social handles
  payment  : payment method
  terms    : two consents → submit

Every answer is merged into the draft through DraftAggregator and the
aggregator is written back to FSM data before the next question is shown.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from aiogram import Bot, F, Router
from aiogram.enums import ParseMode
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.config import settings
from expo_bot.keyboards import (
    ChoiceCb, ConsentCb, DelegateCb, MainMenuCb, PackageCb, WizardCb,
    back_to_main, delegates_kb, organization_type_kb, package_choice_kb,
    payment_method_kb, terms_kb, text_step_kb,
)
from expo_bot.models.models import OrganizationType, PaymentMethod
from expo_bot.services import (
    DraftAggregator, FileStorage, LogoFile, RegistrationDraft, RegistrationSubmitter,
    SocialMedia, WIZARD_STEPS, fetch_active_packages, get_aggregator, get_package,
    save_aggregator,
)
from expo_bot.states import SponsorRegistrationStates as S
from expo_bot.utils import escape_md
from expo_bot.validators import (
    FASCIA_MAX_LENGTH, clamp_fascia_name, validate_email, validate_phone,
)

logger = logging.getLogger(__name__)
router = Router(name="sponsor_registration")

ALLOWED_LOGO_TYPES = {"image/png", "image/jpeg", "image/svg+xml", "image/webp"}
SOCIAL_NETWORKS = ("twitter", "facebook", "linkedin", "instagram")


@dataclass(frozen=True)
class Question:
    section: str
    state: State
    field: str
    prompt: str
    required: bool = True


QUESTIONS: list[Question] = [
    Question("company",   S.company_name,      "company_name",      "🏢 Enter your *company name*:"),
    Question("company",   S.company_website,   "company_website",   "🌐 Company *website* (optional):", required=False),
    Question("company",   S.country,           "country",           "🌍 *Country*:"),
    Question("company",   S.organization_type, "organization_type", "🏷 Select your *organization type*:"),
    Question("company",   S.company_logo,      "company_logo",      "🖼 Send your *company logo* as an image (PNG, JPG, SVG, max {max_mb} MB) or skip:", required=False),
    Question("contact",   S.full_name,         "full_name",         "👤 Contact person — *full name*:"),
    Question("contact",   S.job_title,         "job_title",         "💼 *Job title*:"),
    Question("contact",   S.email,             "email",             "📧 *Email address*:"),
    Question("contact",   S.phone,             "phone",             "📱 *Phone number* (e.g. +254712345678):"),
    Question("package",   S.package,           "package",           "📦 Choose a *sponsorship package*:"),
    Question("delegates", S.delegates,         "delegate_names",    "👥 *Delegates* attending the expo.\nTap a slot to enter a name, ➕ / ➖ to change the count:"),
    Question("branding",  S.fascia_name,       "fascia_name",       "🪧 *Fascia name* for your booth (max 25 characters):"),
    Question("branding",  S.social_media,      "social_media",      "🔗 Social media handles (optional), one per line:\n`twitter: @acme`\n`facebook: acme`\n`linkedin: acme-ltd`\n`instagram: @acme`", required=False),
    Question("payment",   S.payment_method,    "payment_method",    "💳 Choose your *payment method*:"),
    Question("terms",     S.terms,             "terms",             ""),
]
_BY_STATE = {q.state.state: i for i, q in enumerate(QUESTIONS)}
_SECTION_TITLES = dict(WIZARD_STEPS)
_SECTION_INDEX = {sid: i for i, (sid, _) in enumerate(WIZARD_STEPS)}

_TEXT_STATES = [
    S.company_name, S.company_website, S.country,
    S.full_name, S.job_title, S.email, S.phone,
    S.fascia_name,
]


def _first_question(section: str) -> int:
    return next(i for i, q in enumerate(QUESTIONS) if q.section == section)


def _progress(section: str) -> str:
    idx = _SECTION_INDEX[section]
    return f"Step {idx + 1}/{len(WIZARD_STEPS)} · *{_SECTION_TITLES[section]}*"


def summary_text(draft: RegistrationDraft, package_label: str) -> str:
    delegates = "\n".join(
        f"   {i + 1}. {escape_md(n)}" for i, n in enumerate(draft.delegate_names) if n
    ) or "   —"
    socials = ", ".join(
        f"{k}: {escape_md(v)}" for k, v in draft.social_media.model_dump().items() if v
    ) or "—"
    return (
        f"📝 *Review your registration*\n\n"
        f"🏢 {escape_md(draft.company_name)} ({OrganizationType.LABELS.get(draft.organization_type, draft.organization_type)})\n"
        f"🌍 {escape_md(draft.country)}"
        f"{'  ·  ' + escape_md(draft.company_website) if draft.company_website else ''}\n"
        f"🖼 Logo: {'attached' if draft.company_logo else '—'}\n\n"
        f"👤 {escape_md(draft.full_name)}, {escape_md(draft.job_title)}\n"
        f"📧 {escape_md(draft.email)}  📱 {escape_md(draft.phone)}\n\n"
        f"📦 Package: {package_label}\n"
        f"👥 Delegates ({draft.delegate_count}):\n{delegates}\n\n"
        f"🪧 Fascia: {escape_md(draft.fascia_name)}\n"
        f"🔗 {socials}\n"
        f"💳 {PaymentMethod.LABELS.get(draft.payment_method, '—')}"
    )


async def _package_label(session: AsyncSession, package_id: str) -> str:
    if not package_id:
        return "—"
    pkg = await get_package(session, package_id)
    if pkg is None:
        return "—"
    return f"{pkg.name} ({pkg.display_price})"


async def _render(
    session: AsyncSession,
    agg: DraftAggregator,
    index: int,
) -> tuple[str, InlineKeyboardMarkup]:
    q = QUESTIONS[index]
    draft = agg.draft
    header = _progress(q.section)

    if q.state == S.organization_type:
        return f"{header}\n\n{q.prompt}", organization_type_kb(draft.organization_type)
    if q.state == S.package:
        packages = await fetch_active_packages(session)
        if not packages:
            return f"{header}\n\n⚠️ No sponsorship packages are available right now.", back_to_main()
        return f"{header}\n\n{q.prompt}", package_choice_kb(packages, draft.package)
    if q.state == S.delegates:
        return f"{header}\n\n{q.prompt}", delegates_kb(draft)
    if q.state == S.payment_method:
        text = f"{header}\n\n{q.prompt}"
        if draft.payment_method:
            text += f"\n\n_{PaymentMethod.INSTRUCTIONS[draft.payment_method]}_"
        text += "\n\nℹ️ A non-refundable reservation fee of KES 30,000 secures your spot. Full payment is due 30 days before the event."
        return text, payment_method_kb(draft.payment_method)
    if q.state == S.terms:
        text = (
            f"{header}\n\n"
            f"{summary_text(draft, await _package_label(session, draft.package))}\n\n"
            f"Please accept the terms and give consent, then submit."
        )
        return text, terms_kb(draft)

    prompt = q.prompt.format(max_mb=settings.MAX_LOGO_SIZE_MB)
    current = getattr(draft, q.field, "")
    if isinstance(current, str) and current:
        prompt += f"\n_Current: {escape_md(current)}_"
    can_back = index > 0
    return f"{header}\n\n{prompt}", text_step_kb(q.section, can_skip=not q.required, can_back=can_back)


async def _ask(
    message: Message,
    state: FSMContext,
    session: AsyncSession,
    agg: DraftAggregator,
    index: int,
    edit: bool = False,
) -> None:
    """Show question `index`, move FSM + aggregator there, persist the draft."""
    q = QUESTIONS[index]
    agg.go_to(q.section)
    await state.set_state(q.state)
    await save_aggregator(state, agg)

    text, kb = await _render(session, agg, index)
    if edit:
        await message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)
    else:
        await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)


async def _advance(
    message: Message,
    state: FSMContext,
    session: AsyncSession,
    agg: DraftAggregator,
    index: int,
    edit: bool = False,
) -> None:
    """Go to the question after `index`; crossing a section boundary requires it to be complete."""
    current = QUESTIONS[index]
    nxt = index + 1
    if QUESTIONS[nxt].section != current.section:
        if not agg.validate_step(current.section):
            # Something required in this section is still empty, restart it
            nxt = _first_question(current.section)
        else:
            agg.next_step()
    await _ask(message, state, session, agg, nxt, edit=edit)


# ── Entry ─────────────────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "sponsor"))
async def cq_start_sponsor(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await state.clear()
    agg = DraftAggregator()
    await callback.message.answer(
        "🏆 *Sponsorship Registration*\n"
        "Showcase your brand at the Regional Climate Change & AgriExpo.",
        parse_mode=ParseMode.MARKDOWN,
    )
    await _ask(callback.message, state, session, agg, 0)
    await callback.answer()


# ── Free-text answers ─────────────────────────────────────────────────────────

@router.message(StateFilter(*_TEXT_STATES))
async def msg_text_answer(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    current = await state.get_state()
    index = _BY_STATE[current]
    q = QUESTIONS[index]
    value = message.text.strip() if message.text else ""

    if q.required and not value:
        await message.answer("⚠️ This field is required. Please try again:")
        return
    if q.state == S.email and not validate_email(value):
        await message.answer("⚠️ Please enter a valid email address:")
        return
    if q.state == S.phone and not validate_phone(value):
        await message.answer("⚠️ Please enter a valid phone number:")
        return
    if q.state == S.fascia_name:
        if len(value) > FASCIA_MAX_LENGTH:
            await message.answer(f"✂️ Fascia names are limited to {FASCIA_MAX_LENGTH} characters, trimmed.")
        value = clamp_fascia_name(value)

    agg = await get_aggregator(state)
    agg.update(**{q.field: value})
    await _advance(message, state, session, agg, index)


@router.message(S.social_media)
async def msg_social_media(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    handles = {}
    for line in (message.text or "").splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        if key in SOCIAL_NETWORKS:
            handles[key] = value.strip()

    agg = await get_aggregator(state)
    # Handles are replaced as a whole object, not merged per network
    agg.update(social_media=SocialMedia(**handles))
    await _advance(message, state, session, agg, _BY_STATE[S.social_media.state])


# ── Logo upload ───────────────────────────────────────────────────────────────

@router.message(S.company_logo, F.document | F.photo)
async def msg_company_logo(
    message: Message,
    bot: Bot,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    if message.document:
        doc = message.document
        if doc.mime_type not in ALLOWED_LOGO_TYPES:
            await message.answer("⚠️ Please send a PNG, JPG, SVG or WebP image.")
            return
        file_id, name, size, mime = doc.file_id, doc.file_name or "logo.png", doc.file_size, doc.mime_type
    else:
        photo = message.photo[-1]
        file_id, name, size, mime = photo.file_id, "logo.jpg", photo.file_size, "image/jpeg"

    if size and size > settings.max_logo_bytes:
        await message.answer(f"⚠️ The logo must be smaller than {settings.MAX_LOGO_SIZE_MB} MB.")
        return

    buf = await bot.download(file_id)
    agg = await get_aggregator(state)
    agg.update(company_logo=LogoFile(name=name, content=buf.read(), content_type=mime))
    await message.answer(f"🖼 Logo received: `{escape_md(name)}`", parse_mode=ParseMode.MARKDOWN)
    await _advance(message, state, session, agg, _BY_STATE[S.company_logo.state])


@router.message(S.company_logo)
async def msg_company_logo_hint(message: Message) -> None:
    await message.answer(
        "👆 Send the logo as an image or press *Skip*.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=text_step_kb("company", can_skip=True),
    )


# ── Inline choices ────────────────────────────────────────────────────────────

@router.callback_query(ChoiceCb.filter(F.field == "organization_type"), S.organization_type)
async def cq_organization_type(
    callback: CallbackQuery,
    callback_data: ChoiceCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    agg = await get_aggregator(state)
    agg.update(organization_type=callback_data.value)
    await _advance(callback.message, state, session, agg, _BY_STATE[S.organization_type.state], edit=True)
    await callback.answer()


@router.callback_query(PackageCb.filter(F.action == "choose"), S.package)
async def cq_package(
    callback: CallbackQuery,
    callback_data: PackageCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    pkg = await get_package(session, callback_data.pid)
    if pkg is None:
        await callback.answer("Package not found.", show_alert=True)
        return
    agg = await get_aggregator(state)
    agg.update(package=pkg.id)
    await _advance(callback.message, state, session, agg, _BY_STATE[S.package.state], edit=True)
    await callback.answer(f"📦 {pkg.name}")


@router.callback_query(ChoiceCb.filter(F.field == "payment_method"), S.payment_method)
async def cq_payment_method(
    callback: CallbackQuery,
    callback_data: ChoiceCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    if callback_data.value not in PaymentMethod.LABELS:
        await callback.answer("Unknown payment method.", show_alert=True)
        return
    agg = await get_aggregator(state)
    agg.update(payment_method=callback_data.value)
    await _advance(callback.message, state, session, agg, _BY_STATE[S.payment_method.state], edit=True)
    await callback.answer(PaymentMethod.INSTRUCTIONS[callback_data.value], show_alert=True)


# ── Delegates ─────────────────────────────────────────────────────────────────

@router.callback_query(DelegateCb.filter(F.action.in_({"add", "dec", "remove"})), S.delegates)
async def cq_delegate_count(
    callback: CallbackQuery,
    callback_data: DelegateCb,
    state: FSMContext,
) -> None:
    agg = await get_aggregator(state)
    if callback_data.action == "add":
        applied = agg.add_delegate()
    elif callback_data.action == "dec":
        applied = agg.decrement_delegates()
    else:
        applied = agg.remove_delegate(callback_data.idx)

    if not applied:
        await callback.answer("At least one delegate is required.", show_alert=True)
        return

    await save_aggregator(state, agg)
    await callback.message.edit_reply_markup(reply_markup=delegates_kb(agg.draft))
    await callback.answer()


@router.callback_query(DelegateCb.filter(F.action == "edit"), S.delegates)
async def cq_delegate_edit(
    callback: CallbackQuery,
    callback_data: DelegateCb,
    state: FSMContext,
) -> None:
    await state.update_data(delegate_idx=callback_data.idx)
    await state.set_state(S.delegate_name)
    await callback.message.answer(
        f"✏️ Full name of delegate *{callback_data.idx + 1}*:",
        parse_mode=ParseMode.MARKDOWN,
    )
    await callback.answer()


@router.message(S.delegate_name)
async def msg_delegate_name(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    name = message.text.strip() if message.text else ""
    if not name:
        await message.answer("⚠️ Enter the delegate's full name:")
        return
    data = await state.get_data()
    agg = await get_aggregator(state)
    if not agg.set_delegate_name(data.get("delegate_idx", 0), name):
        await message.answer("⚠️ That delegate slot no longer exists.")
    await _ask(message, state, session, agg, _BY_STATE[S.delegates.state])


@router.callback_query(DelegateCb.filter(F.action == "done"), S.delegates)
async def cq_delegates_done(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    agg = await get_aggregator(state)
    if not agg.validate_step("delegates"):
        await callback.answer("Please enter a name for every delegate.", show_alert=True)
        return
    await _advance(callback.message, state, session, agg, _BY_STATE[S.delegates.state], edit=True)
    await callback.answer()


# ── Navigation ────────────────────────────────────────────────────────────────

@router.callback_query(WizardCb.filter(F.action == "skip"), StateFilter(S.company_website, S.company_logo, S.social_media))
async def cq_skip(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    current = await state.get_state()
    index = _BY_STATE[current]
    agg = await get_aggregator(state)
    if QUESTIONS[index].state == S.company_logo:
        agg.update(company_logo=None)
    await _advance(callback.message, state, session, agg, index, edit=True)
    await callback.answer()


@router.callback_query(WizardCb.filter(F.action == "back"), StateFilter(S))
async def cq_back(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    current = await state.get_state()
    index = _BY_STATE.get(current, _BY_STATE[S.delegates.state])
    if index == 0:
        await callback.answer()
        return
    agg = await get_aggregator(state)
    await _ask(callback.message, state, session, agg, index - 1, edit=True)
    await callback.answer()


# ── Terms & submit ────────────────────────────────────────────────────────────

@router.callback_query(ConsentCb.filter(), S.terms)
async def cq_toggle_consent(
    callback: CallbackQuery,
    callback_data: ConsentCb,
    state: FSMContext,
) -> None:
    if callback_data.field not in ("terms_accepted", "consent_given"):
        await callback.answer()
        return
    agg = await get_aggregator(state)
    agg.update(**{callback_data.field: not getattr(agg.draft, callback_data.field)})
    await save_aggregator(state, agg)
    await callback.message.edit_reply_markup(reply_markup=terms_kb(agg.draft))
    await callback.answer()


@router.callback_query(WizardCb.filter(F.action == "submit"), S.terms)
async def cq_submit(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    file_storage: FileStorage,
) -> None:
    data = await state.get_data()
    if data.get("submitting"):
        await callback.answer("⏳ Your registration is being submitted…", show_alert=True)
        return

    agg = await get_aggregator(state)
    missing = agg.first_incomplete_step()
    if missing is not None:
        await callback.answer(
            f"Please fill in all required fields ({_SECTION_TITLES[missing]}).",
            show_alert=True,
        )
        return

    await state.update_data(submitting=True)
    await callback.answer("⏳ Processing…")

    submitter = RegistrationSubmitter(session, file_storage)
    result = await submitter.submit(agg.draft)

    if not result.success:
        await state.update_data(submitting=False)
        await callback.message.answer(
            f"❌ *Registration failed*\n\n{escape_md(result.error or '')}\n\n"
            f"You can press *Submit* again to retry.",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=terms_kb(agg.draft),
        )
        return

    row = result.data or {}
    try:
        await callback.message.edit_text(
            f"🎉 *Registration successful!*\n\n"
            f"Reference: `SP-{row.get('id')}`\n"
            f"🏢 {escape_md(row.get('company_name', ''))}\n"
            f"💳 {PaymentMethod.LABELS.get(row.get('payment_method', ''), '')}: "
            f"{PaymentMethod.INSTRUCTIONS.get(row.get('payment_method', ''), '')}\n\n"
            f"Our team will contact you at {escape_md(row.get('contact_email', ''))}.",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=back_to_main(),
        )
    except Exception:
        # The row is rolled back with the session; keep the draft for a retry
        await state.update_data(submitting=False)
        raise
    await state.clear()

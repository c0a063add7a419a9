"""
First Lady Marathon registration FSM handler.

Flow:
  register → marathon → full name → email → phone → date of birth → gender
           → emergency contact → race category → t-shirt size
           → medical conditions → confirm (accept terms + waiver) → saved ✅
"""
import logging
from datetime import date, datetime
from typing import Optional

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.keyboards import (
    ChoiceCb, MainMenuCb, WizardCb,
    back_to_main, confirm_kb, gender_kb, race_category_kb, skip_kb,
    t_shirt_size_kb, text_step_kb,
)
from expo_bot.models.models import RaceCategory
from expo_bot.services import register_marathon_runner
from expo_bot.states import MarathonRegistrationStates as M
from expo_bot.utils import escape_md
from expo_bot.validators import (
    MIN_RUNNER_AGE, MarathonRunnerData, first_error_message,
    validate_email, validate_phone,
)

logger = logging.getLogger(__name__)
router = Router(name="marathon_registration")

_DATE_FORMATS = ("%d.%m.%Y", "%d/%m/%Y", "%Y-%m-%d")


def parse_birth_date(text: str) -> Optional[date]:
    """Accepts DD.MM.YYYY, DD/MM/YYYY or YYYY-MM-DD."""
    text = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_emergency_contact(text: str) -> Optional[dict]:
    """'Jane Doe, 0712345678, Sister' → {'name', 'phone', 'relationship'}."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3 or not all(parts):
        return None
    name, phone, relationship = parts
    return {"name": name, "phone": phone, "relationship": relationship}


def _cancel_kb():
    return text_step_kb("marathon", can_back=False)


# ── Entry ─────────────────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "marathon"))
async def cq_start_marathon(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await state.set_state(M.full_name)
    await callback.message.edit_text(
        "🏃 *First Lady Marathon* — KES 2,000\n\n"
        "Includes race kit, t-shirt, medal and refreshments.\n\n"
        "Enter your *full name*:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=_cancel_kb(),
    )
    await callback.answer()


# ── Personal details ──────────────────────────────────────────────────────────

@router.message(M.full_name)
async def msg_full_name(message: Message, state: FSMContext) -> None:
    name = message.text.strip() if message.text else ""
    if not name:
        await message.answer("⚠️ Please enter your full name:", reply_markup=_cancel_kb())
        return
    await state.update_data(full_name=name)
    await state.set_state(M.email)
    await message.answer("📧 Your *email address*:", parse_mode=ParseMode.MARKDOWN, reply_markup=_cancel_kb())


@router.message(M.email)
async def msg_email(message: Message, state: FSMContext) -> None:
    email = message.text.strip() if message.text else ""
    if not validate_email(email):
        await message.answer("⚠️ Please enter a valid email address:", reply_markup=_cancel_kb())
        return
    await state.update_data(email=email)
    await state.set_state(M.phone)
    await message.answer("📱 Your *phone number*:", parse_mode=ParseMode.MARKDOWN, reply_markup=_cancel_kb())


@router.message(M.phone)
async def msg_phone(message: Message, state: FSMContext) -> None:
    phone = message.text.strip() if message.text else ""
    if not validate_phone(phone):
        await message.answer("⚠️ Please enter a valid phone number:", reply_markup=_cancel_kb())
        return
    await state.update_data(phone=phone)
    await state.set_state(M.date_of_birth)
    await message.answer(
        "🎂 Your *date of birth* (DD.MM.YYYY):",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=_cancel_kb(),
    )


@router.message(M.date_of_birth)
async def msg_date_of_birth(message: Message, state: FSMContext) -> None:
    born = parse_birth_date(message.text or "")
    if born is None:
        await message.answer("⚠️ Date not recognised. Use DD.MM.YYYY:", reply_markup=_cancel_kb())
        return
    if date.today().year - born.year < MIN_RUNNER_AGE:
        await message.answer(
            f"⚠️ Participants must be at least {MIN_RUNNER_AGE} years old.",
            reply_markup=back_to_main(),
        )
        return
    await state.update_data(date_of_birth=born.isoformat())
    await state.set_state(M.gender)
    await message.answer("⚧ *Gender*:", parse_mode=ParseMode.MARKDOWN, reply_markup=gender_kb())


@router.callback_query(ChoiceCb.filter(F.field == "gender"), M.gender)
async def cq_gender(callback: CallbackQuery, callback_data: ChoiceCb, state: FSMContext) -> None:
    await state.update_data(gender=callback_data.value)
    await state.set_state(M.emergency_contact)
    await callback.message.edit_text(
        "🆘 *Emergency contact*\n\nSend as: `name, phone, relationship`\n"
        "_e.g. Jane Doe, 0712345678, Sister_",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=_cancel_kb(),
    )
    await callback.answer()


@router.message(M.emergency_contact)
async def msg_emergency_contact(message: Message, state: FSMContext) -> None:
    contact = parse_emergency_contact(message.text or "")
    if contact is None:
        await message.answer(
            "⚠️ Please send three comma-separated values: name, phone, relationship",
            reply_markup=_cancel_kb(),
        )
        return
    if not validate_phone(contact["phone"]):
        await message.answer("⚠️ The emergency contact phone is not valid.", reply_markup=_cancel_kb())
        return
    await state.update_data(emergency_contact=contact)
    await state.set_state(M.race_category)
    await message.answer("🏁 Choose your *race category*:", parse_mode=ParseMode.MARKDOWN, reply_markup=race_category_kb())


# ── Race options ──────────────────────────────────────────────────────────────

@router.callback_query(ChoiceCb.filter(F.field == "race"), M.race_category)
async def cq_race_category(callback: CallbackQuery, callback_data: ChoiceCb, state: FSMContext) -> None:
    await state.update_data(race_category=callback_data.value)
    await state.set_state(M.t_shirt_size)
    await callback.message.edit_text("👕 *T-shirt size*:", parse_mode=ParseMode.MARKDOWN, reply_markup=t_shirt_size_kb())
    await callback.answer()


@router.callback_query(ChoiceCb.filter(F.field == "tshirt"), M.t_shirt_size)
async def cq_t_shirt_size(callback: CallbackQuery, callback_data: ChoiceCb, state: FSMContext) -> None:
    await state.update_data(t_shirt_size=callback_data.value)
    await state.set_state(M.medical)
    await callback.message.edit_text(
        "🩺 Any *medical conditions* we should know about? (optional)",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=skip_kb("marathon_medical"),
    )
    await callback.answer()


async def _show_confirm(message: Message, state: FSMContext, edit: bool = False) -> None:
    await state.set_state(M.confirm)
    data = await state.get_data()
    contact = data["emergency_contact"]
    text = (
        f"📝 *Check your entry:*\n\n"
        f"👤 {escape_md(data['full_name'])}\n"
        f"📧 {escape_md(data['email'])}\n"
        f"📱 {escape_md(data['phone'])}\n"
        f"🎂 {data['date_of_birth']}\n"
        f"🆘 {escape_md(contact['name'])} ({escape_md(contact['relationship'])}), {escape_md(contact['phone'])}\n"
        f"🏁 {RaceCategory.LABELS.get(data['race_category'], data['race_category'])}\n"
        f"👕 {data['t_shirt_size']}\n"
        f"🩺 {escape_md(data.get('medical_conditions') or '—')}\n\n"
        f"Confirming accepts the terms and conditions and the liability waiver."
    )
    if edit:
        await message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=confirm_kb())
    else:
        await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=confirm_kb())


@router.message(M.medical)
async def msg_medical(message: Message, state: FSMContext) -> None:
    await state.update_data(medical_conditions=(message.text or "").strip())
    await _show_confirm(message, state)


@router.callback_query(WizardCb.filter(F.action == "skip"), M.medical)
async def cq_skip_medical(callback: CallbackQuery, state: FSMContext) -> None:
    await _show_confirm(callback.message, state, edit=True)
    await callback.answer()


# ── Confirm ───────────────────────────────────────────────────────────────────

@router.callback_query(F.data == "form_confirm", M.confirm)
async def cq_confirm_marathon(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    data = await state.get_data()
    try:
        payload = MarathonRunnerData(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            date_of_birth=data.get("date_of_birth"),
            gender=data.get("gender"),
            emergency_contact=data.get("emergency_contact"),
            race_category=data.get("race_category", "5K"),
            t_shirt_size=data.get("t_shirt_size", "M"),
            medical_conditions=data.get("medical_conditions", ""),
            terms_accepted=True,
            liability_accepted=True,
        )
    except ValidationError as exc:
        await callback.answer(first_error_message(exc), show_alert=True)
        return

    entry, error = await register_marathon_runner(session, payload)
    if error:
        logger.warning("Marathon registration failed: %s", error)
        await callback.answer(error[:200], show_alert=True)
        return

    await state.clear()
    await callback.message.edit_text(
        f"🎉 *You're in the race!*\n\n"
        f"Reference: `FLM-{entry.id}`\n"
        f"🏁 {RaceCategory.LABELS.get(entry.race_category, entry.race_category)}\n\n"
        f"Race kit collection details will be sent to {escape_md(entry.email)}.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=back_to_main(),
    )
    await callback.answer("✅ Entry received!")

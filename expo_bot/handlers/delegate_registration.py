"""
Delegate self-registration FSM handler.

Flow:
  register → delegate → first name → last name → email → phone
           → company → job title → attendance type → dietary needs
           → confirm (accept terms) → saved ✅
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.keyboards import (
    ChoiceCb, MainMenuCb, WizardCb,
    attendance_type_kb, back_to_main, confirm_kb, skip_kb, text_step_kb,
)
from expo_bot.models.models import AttendanceType
from expo_bot.services import register_delegate
from expo_bot.states import DelegateRegistrationStates as D
from expo_bot.utils import escape_md
from expo_bot.validators import (
    DelegateAttendeeData, first_error_message, validate_email, validate_phone,
)

logger = logging.getLogger(__name__)
router = Router(name="delegate_registration")


def _cancel_kb():
    return text_step_kb("delegate", can_back=False)


# ── Entry ─────────────────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "delegate"))
async def cq_start_delegate(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await state.set_state(D.first_name)
    await callback.message.edit_text(
        "👥 *Delegate Registration* — KES 15,000\n\n"
        "Access to all expo events, networking, conference materials, lunch and refreshments.\n\n"
        "Enter your *first name*:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=_cancel_kb(),
    )
    await callback.answer()


# ── Names ─────────────────────────────────────────────────────────────────────

@router.message(D.first_name)
async def msg_first_name(message: Message, state: FSMContext) -> None:
    name = message.text.strip() if message.text else ""
    if not name:
        await message.answer("⚠️ Please enter your first name:", reply_markup=_cancel_kb())
        return
    await state.update_data(first_name=name)
    await state.set_state(D.last_name)
    await message.answer("Enter your *last name*:", parse_mode=ParseMode.MARKDOWN, reply_markup=_cancel_kb())


@router.message(D.last_name)
async def msg_last_name(message: Message, state: FSMContext) -> None:
    name = message.text.strip() if message.text else ""
    if not name:
        await message.answer("⚠️ Please enter your last name:", reply_markup=_cancel_kb())
        return
    await state.update_data(last_name=name)
    await state.set_state(D.email)
    await message.answer("📧 Your *email address*:", parse_mode=ParseMode.MARKDOWN, reply_markup=_cancel_kb())


# ── Contact ───────────────────────────────────────────────────────────────────

@router.message(D.email)
async def msg_email(message: Message, state: FSMContext) -> None:
    email = message.text.strip() if message.text else ""
    if not validate_email(email):
        await message.answer("⚠️ Please enter a valid email address:", reply_markup=_cancel_kb())
        return
    await state.update_data(email=email)
    await state.set_state(D.phone)
    await message.answer("📱 Your *phone number*:", parse_mode=ParseMode.MARKDOWN, reply_markup=_cancel_kb())


@router.message(D.phone)
async def msg_phone(message: Message, state: FSMContext) -> None:
    phone = message.text.strip() if message.text else ""
    if not validate_phone(phone):
        await message.answer("⚠️ Please enter a valid phone number:", reply_markup=_cancel_kb())
        return
    await state.update_data(phone=phone)
    await state.set_state(D.company)
    await message.answer("🏢 *Company / organization* (optional):", parse_mode=ParseMode.MARKDOWN, reply_markup=skip_kb("delegate_company"))


# ── Optional details ──────────────────────────────────────────────────────────

@router.message(D.company)
async def msg_company(message: Message, state: FSMContext) -> None:
    await state.update_data(company=(message.text or "").strip())
    await state.set_state(D.job_title)
    await message.answer("💼 *Job title* (optional):", parse_mode=ParseMode.MARKDOWN, reply_markup=skip_kb("delegate_job"))


@router.callback_query(WizardCb.filter(F.action == "skip"), D.company)
async def cq_skip_company(callback: CallbackQuery, state: FSMContext) -> None:
    await state.set_state(D.job_title)
    await callback.message.edit_text("💼 *Job title* (optional):", parse_mode=ParseMode.MARKDOWN, reply_markup=skip_kb("delegate_job"))
    await callback.answer()


async def _ask_attendance(message: Message, state: FSMContext, edit: bool = False) -> None:
    await state.set_state(D.attendance_type)
    text = "🎟 How will you *attend*?"
    if edit:
        await message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=attendance_type_kb())
    else:
        await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=attendance_type_kb())


@router.message(D.job_title)
async def msg_job_title(message: Message, state: FSMContext) -> None:
    await state.update_data(job_title=(message.text or "").strip())
    await _ask_attendance(message, state)


@router.callback_query(WizardCb.filter(F.action == "skip"), D.job_title)
async def cq_skip_job_title(callback: CallbackQuery, state: FSMContext) -> None:
    await _ask_attendance(callback.message, state, edit=True)
    await callback.answer()


@router.callback_query(ChoiceCb.filter(F.field == "attendance_type"), D.attendance_type)
async def cq_attendance_type(callback: CallbackQuery, callback_data: ChoiceCb, state: FSMContext) -> None:
    await state.update_data(attendance_type=callback_data.value)
    await state.set_state(D.dietary)
    await callback.message.edit_text(
        "🥗 Any *dietary requirements* or special needs? (optional)",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=skip_kb("delegate_dietary"),
    )
    await callback.answer()


async def _show_confirm(message: Message, state: FSMContext, edit: bool = False) -> None:
    await state.set_state(D.confirm)
    data = await state.get_data()
    text = (
        f"📝 *Check your registration:*\n\n"
        f"👤 {escape_md(data['first_name'])} {escape_md(data['last_name'])}\n"
        f"📧 {escape_md(data['email'])}\n"
        f"📱 {escape_md(data['phone'])}\n"
        f"🏢 {escape_md(data.get('company') or '—')}\n"
        f"💼 {escape_md(data.get('job_title') or '—')}\n"
        f"🎟 {AttendanceType.LABELS.get(data.get('attendance_type', 'physical'), '')}\n"
        f"🥗 {escape_md(data.get('dietary_requirements') or '—')}"
    )
    if edit:
        await message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=confirm_kb())
    else:
        await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=confirm_kb())


@router.message(D.dietary)
async def msg_dietary(message: Message, state: FSMContext) -> None:
    await state.update_data(dietary_requirements=(message.text or "").strip())
    await _show_confirm(message, state)


@router.callback_query(WizardCb.filter(F.action == "skip"), D.dietary)
async def cq_skip_dietary(callback: CallbackQuery, state: FSMContext) -> None:
    await _show_confirm(callback.message, state, edit=True)
    await callback.answer()


# ── Confirm ───────────────────────────────────────────────────────────────────

@router.callback_query(F.data == "form_confirm", D.confirm)
async def cq_confirm_delegate(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    data = await state.get_data()
    try:
        payload = DelegateAttendeeData(
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            company=data.get("company", ""),
            job_title=data.get("job_title", ""),
            attendance_type=data.get("attendance_type", AttendanceType.PHYSICAL),
            dietary_requirements=data.get("dietary_requirements", ""),
            terms_accepted=True,
        )
    except ValidationError as exc:
        await callback.answer(first_error_message(exc), show_alert=True)
        return

    attendee, error = await register_delegate(session, payload)
    if error:
        logger.warning("Delegate registration failed: %s", error)
        await callback.answer(error[:200], show_alert=True)
        return

    await state.clear()
    await callback.message.edit_text(
        f"🎉 *You're registered!*\n\n"
        f"Reference: `DL-{attendee.id}`\n"
        f"👤 {escape_md(attendee.display_name)}\n\n"
        f"A confirmation will be sent to {escape_md(attendee.email)}.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=back_to_main(),
    )
    await callback.answer("✅ Registration received!")

"""
Common handlers: /start, main menu routing, registration type selection.
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.keyboards import MainMenuCb, main_menu, registration_type_kb
from expo_bot.services import upsert_user

logger = logging.getLogger(__name__)
router = Router(name="common")


# ── /start ────────────────────────────────────────────────────────────────────

@router.message(CommandStart())
async def cmd_start(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
    is_admin: bool,
) -> None:
    tg = message.from_user
    await upsert_user(
        session,
        telegram_id=tg.id,
        first_name=tg.first_name,
        last_name=tg.last_name,
        username=tg.username,
    )
    await state.clear()

    text = (
        f"🌱 Welcome to the *Regional Climate Change & AgriExpo*, {tg.first_name}!\n\n"
        f"Here you can:\n"
        f"• 📝 Register as a delegate, marathon runner or sponsor\n"
        f"• 📦 Compare sponsorship packages\n\n"
        f"Choose an option:"
    )
    await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=main_menu(is_admin))


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext, is_admin: bool) -> None:
    await state.clear()
    await message.answer("❌ Cancelled.", reply_markup=main_menu(is_admin))


# ── Main menu callback ────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "main"))
async def cq_main_menu(callback: CallbackQuery, is_admin: bool, state: FSMContext) -> None:
    await state.clear()
    await callback.message.edit_text(
        "🌱 *Regional Climate Change & AgriExpo*\n\nChoose an option:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=main_menu(is_admin),
    )
    await callback.answer()


@router.callback_query(MainMenuCb.filter(F.action == "register"))
async def cq_registration_types(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await callback.message.edit_text(
        "📝 *Choose your registration type*",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=registration_type_kb(),
    )
    await callback.answer()


@router.callback_query(F.data == "noop")
async def cq_noop(callback: CallbackQuery) -> None:
    await callback.answer()

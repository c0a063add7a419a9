"""
Global fallback handler — included LAST in the dispatcher.

Catches any callback query that no other router handled.
Prevents infinite Telegram spinners from:
  - Stale keyboards after bot restart (MemoryStorage drops wizard drafts)
  - Buttons pressed outside the step they belong to
"""
from aiogram import Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from expo_bot.keyboards import main_menu

router = Router(name="fallback")


@router.callback_query()
async def cq_fallback(
    callback: CallbackQuery,
    state: FSMContext,
    is_admin: bool = False,
) -> None:
    await callback.answer("⚠️ This button has expired. Please start again.", show_alert=True)
    await state.clear()
    try:
        await callback.message.edit_text(
            "🔄 *Session reset.* Return to the main menu:",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=main_menu(is_admin),
        )
    except Exception:
        pass

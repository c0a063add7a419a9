"""
Keyboards for the admin overview.
"""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from expo_bot.keyboards.callbacks import AdminPanelCb, MainMenuCb


def admin_overview_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🏆 Sponsors",   callback_data=AdminPanelCb(action="sponsors").pack()),
        InlineKeyboardButton(text="👥 Delegates",  callback_data=AdminPanelCb(action="attendees").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="🔄 Refresh",    callback_data=AdminPanelCb(action="overview").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="🔙 Main menu",  callback_data=MainMenuCb(action="main").pack()),
    )
    return builder.as_markup()


def admin_back_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🔙 Overview",   callback_data=AdminPanelCb(action="overview").pack()),
    )
    return builder.as_markup()

"""
Main menu keyboards — registration type selection and admin entry.
"""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from expo_bot.keyboards.callbacks import AdminPanelCb, MainMenuCb
from expo_bot.models.models import RegistrationType


def main_menu(is_admin: bool = False) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="📝 Register",              callback_data=MainMenuCb(action="register").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="📦 Sponsorship packages",  callback_data=MainMenuCb(action="packages").pack()),
    )
    if is_admin:
        builder.row(
            InlineKeyboardButton(text="⚡ Admin overview",    callback_data=AdminPanelCb(action="overview").pack()),
        )
    return builder.as_markup()


def registration_type_kb() -> InlineKeyboardMarkup:
    """Delegate / marathon / sponsor choice with the headline price."""
    emoji = {
        RegistrationType.DELEGATE: "👥",
        RegistrationType.MARATHON: "🏃",
        RegistrationType.SPONSOR:  "🏆",
    }
    builder = InlineKeyboardBuilder()
    for key, label in RegistrationType.LABELS.items():
        builder.row(
            InlineKeyboardButton(
                text=f"{emoji[key]} {label} — {RegistrationType.PRICES[key]}",
                callback_data=MainMenuCb(action=key).pack(),
            )
        )
    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data=MainMenuCb(action="main").pack()))
    return builder.as_markup()


def back_to_main() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔙 Main menu", callback_data=MainMenuCb(action="main").pack()))
    return builder.as_markup()

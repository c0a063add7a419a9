"""
Keyboards for the sponsorship package catalog and comparison screen.
"""
from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from expo_bot.keyboards.callbacks import MainMenuCb, PackageCb
from expo_bot.services.comparison_service import SelectionSet
from expo_bot.services.package_service import Package


def comparison_kb(packages: Sequence[Package], selection: SelectionSet) -> InlineKeyboardMarkup:
    """One toggle per package (☑️ when compared) plus clear / register."""
    builder = InlineKeyboardBuilder()
    for pkg in packages:
        checked = "☑️" if pkg.id in selection else "☐"
        star = " ⭐" if pkg.featured else ""
        builder.row(
            InlineKeyboardButton(
                text=f"{checked} {pkg.name}{star}",
                callback_data=PackageCb(action="toggle", pid=pkg.id).pack(),
            )
        )
    if len(selection):
        builder.row(
            InlineKeyboardButton(text="🧹 Clear", callback_data=PackageCb(action="clear").pack()),
        )
    builder.row(
        InlineKeyboardButton(text="🏆 Register as sponsor", callback_data=MainMenuCb(action="sponsor").pack()),
    )
    builder.row(InlineKeyboardButton(text="🔙 Main menu", callback_data=MainMenuCb(action="main").pack()))
    return builder.as_markup()

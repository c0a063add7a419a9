"""
Keyboards for the registration FSM flows (sponsor wizard, delegate, marathon).
"""
from typing import Dict, Iterable, List

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from expo_bot.keyboards.callbacks import (
    ChoiceCb, ConsentCb, DelegateCb, MainMenuCb, PackageCb, WizardCb,
)
from expo_bot.models.models import (
    AttendanceType, OrganizationType, PaymentMethod, RaceCategory, TShirtSize,
)
from expo_bot.services.draft_service import RegistrationDraft
from expo_bot.services.package_service import Package


def _cancel_row() -> InlineKeyboardButton:
    return InlineKeyboardButton(text="❌ Cancel", callback_data=MainMenuCb(action="main").pack())


def _nav_row(step: str, can_skip: bool = False, can_back: bool = True) -> List[InlineKeyboardButton]:
    row = []
    if can_back:
        row.append(InlineKeyboardButton(text="◀️ Back", callback_data=WizardCb(action="back", step=step).pack()))
    if can_skip:
        row.append(InlineKeyboardButton(text="⏭ Skip", callback_data=WizardCb(action="skip", step=step).pack()))
    return row


def text_step_kb(step: str, can_skip: bool = False, can_back: bool = True) -> InlineKeyboardMarkup:
    """Keyboard under a free-text question."""
    builder = InlineKeyboardBuilder()
    nav = _nav_row(step, can_skip=can_skip, can_back=can_back)
    if nav:
        builder.row(*nav)
    builder.row(_cancel_row())
    return builder.as_markup()


def choice_kb(
    field: str,
    options: Dict[str, str],
    selected: str = "",
    step: str = "",
    per_row: int = 1,
    with_nav: bool = True,
) -> InlineKeyboardMarkup:
    """Single-choice list; the current value is marked with 🔘."""
    builder = InlineKeyboardBuilder()
    buttons = [
        InlineKeyboardButton(
            text=f"{'🔘' if key == selected else '⚪️'} {label}",
            callback_data=ChoiceCb(field=field, value=key).pack(),
        )
        for key, label in options.items()
    ]
    for i in range(0, len(buttons), per_row):
        builder.row(*buttons[i:i + per_row])
    if with_nav and step:
        builder.row(*_nav_row(step))
    builder.row(_cancel_row())
    return builder.as_markup()


def organization_type_kb(selected: str = "") -> InlineKeyboardMarkup:
    return choice_kb("organization_type", OrganizationType.LABELS, selected, step="company")


def payment_method_kb(selected: str = "") -> InlineKeyboardMarkup:
    return choice_kb("payment_method", PaymentMethod.LABELS, selected, step="payment")


def package_choice_kb(packages: Iterable[Package], selected: str = "") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for pkg in packages:
        mark = "🔘" if pkg.id == selected else "⚪️"
        star = " ⭐" if pkg.featured else ""
        builder.row(
            InlineKeyboardButton(
                text=f"{mark} {pkg.name} — {pkg.display_price}{star}",
                callback_data=PackageCb(action="choose", pid=pkg.id).pack(),
            )
        )
    builder.row(*_nav_row("package"))
    builder.row(_cancel_row())
    return builder.as_markup()


def delegates_kb(draft: RegistrationDraft) -> InlineKeyboardMarkup:
    """Delegate editor: one button per slot plus ➖ / count / ➕."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="➖", callback_data=DelegateCb(action="dec").pack()),
        InlineKeyboardButton(text=f"👥 {draft.delegate_count}", callback_data="noop"),
        InlineKeyboardButton(text="➕", callback_data=DelegateCb(action="add").pack()),
    )
    for idx, name in enumerate(draft.delegate_names):
        label = name or "— enter name —"
        builder.row(
            InlineKeyboardButton(
                text=f"✏️ {idx + 1}. {label}",
                callback_data=DelegateCb(action="edit", idx=idx).pack(),
            ),
            InlineKeyboardButton(
                text="🗑",
                callback_data=DelegateCb(action="remove", idx=idx).pack(),
            ),
        )
    builder.row(
        InlineKeyboardButton(text="◀️ Back", callback_data=WizardCb(action="back", step="delegates").pack()),
        InlineKeyboardButton(text="Next ▶️", callback_data=DelegateCb(action="done").pack()),
    )
    builder.row(_cancel_row())
    return builder.as_markup()


def terms_kb(draft: RegistrationDraft) -> InlineKeyboardMarkup:
    def box(flag: bool) -> str:
        return "☑️" if flag else "☐"

    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(
            text=f"{box(draft.terms_accepted)} I accept the terms and conditions",
            callback_data=ConsentCb(field="terms_accepted").pack(),
        )
    )
    builder.row(
        InlineKeyboardButton(
            text=f"{box(draft.consent_given)} I consent to data processing",
            callback_data=ConsentCb(field="consent_given").pack(),
        )
    )
    builder.row(
        InlineKeyboardButton(text="◀️ Back", callback_data=WizardCb(action="back", step="terms").pack()),
        InlineKeyboardButton(text="✅ Submit", callback_data=WizardCb(action="submit", step="terms").pack()),
    )
    builder.row(_cancel_row())
    return builder.as_markup()


# ── Delegate / marathon forms ─────────────────────────────────────────────────

def attendance_type_kb() -> InlineKeyboardMarkup:
    return choice_kb("attendance_type", AttendanceType.LABELS, with_nav=False, per_row=2)


def gender_kb() -> InlineKeyboardMarkup:
    return choice_kb(
        "gender",
        {"male": "👨 Male", "female": "👩 Female", "other": "Other"},
        with_nav=False,
        per_row=3,
    )


def race_category_kb() -> InlineKeyboardMarkup:
    return choice_kb("race", RaceCategory.LABELS, with_nav=False)


def t_shirt_size_kb() -> InlineKeyboardMarkup:
    return choice_kb("tshirt", {s: s for s in TShirtSize.ALL}, with_nav=False, per_row=3)


def skip_kb(step: str) -> InlineKeyboardMarkup:
    return text_step_kb(step, can_skip=True, can_back=False)


def confirm_kb() -> InlineKeyboardMarkup:
    """Confirm screen for single-form flows; confirming also accepts the terms."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="✅ Accept terms & submit", callback_data="form_confirm"),
    )
    builder.row(_cancel_row())
    return builder.as_markup()

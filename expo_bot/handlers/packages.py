"""
Sponsorship package catalog and side-by-side comparison (up to 3 packages).
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.keyboards import MainMenuCb, PackageCb, back_to_main, comparison_kb
from expo_bot.services import (
    MAX_COMPARED, CatalogStatus, PackageCatalog, SelectionSet,
    build_comparison, render_comparison,
)
from expo_bot.states import PackageComparisonStates
from expo_bot.utils import escape_md

logger = logging.getLogger(__name__)
router = Router(name="packages")


def _catalog_text(catalog: PackageCatalog, selection: SelectionSet) -> str:
    lines = ["📦 *Sponsorship packages*", ""]
    for pkg in catalog.packages:
        star = " ⭐ _Featured_" if pkg.featured else ""
        lines.append(f"*{escape_md(pkg.name)}* — `{pkg.display_price}`{star}")
        if pkg.description:
            lines.append(f"_{escape_md(pkg.description)}_")
        fee = pkg.display_reservation_fee
        extras = [pkg.slots_label]
        if fee:
            extras.append(f"reservation fee {fee}")
        lines.append(" · ".join(extras))
        lines.append("")
    lines.append(f"Tap up to {MAX_COMPARED} packages to compare them:")
    lines.append("")
    lines.append(render_comparison(build_comparison(catalog.packages, selection)))
    return "\n".join(lines)


async def _show(
    callback: CallbackQuery,
    session: AsyncSession,
    selection: SelectionSet,
) -> None:
    catalog = await PackageCatalog().load(session)
    if catalog.status == CatalogStatus.ERRORED:
        await callback.message.edit_text(
            f"⚠️ Could not load packages: {escape_md(catalog.error or '')}",
            reply_markup=back_to_main(),
        )
        return
    if not catalog.packages:
        await callback.message.edit_text(
            "📦 No sponsorship packages are available right now.",
            reply_markup=back_to_main(),
        )
        return

    # Drop ids of packages that were deactivated since the last render
    selection = SelectionSet(pid for pid in selection if catalog.find(pid))
    await callback.message.edit_text(
        _catalog_text(catalog, selection),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=comparison_kb(catalog.packages, selection),
    )


@router.callback_query(MainMenuCb.filter(F.action == "packages"))
async def cq_packages(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await state.set_state(PackageComparisonStates.comparing)
    await state.update_data(compare=[])
    await _show(callback, session, SelectionSet())
    await callback.answer()


@router.callback_query(PackageCb.filter(F.action == "toggle"), PackageComparisonStates.comparing)
async def cq_toggle_package(
    callback: CallbackQuery,
    callback_data: PackageCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    data = await state.get_data()
    selection = SelectionSet(data.get("compare", []))
    if not selection.toggle(callback_data.pid):
        await callback.answer(
            f"You can compare at most {MAX_COMPARED} packages. Deselect one first.",
            show_alert=True,
        )
        return

    await state.update_data(compare=list(selection.ids))
    await _show(callback, session, selection)
    await callback.answer()


@router.callback_query(PackageCb.filter(F.action == "clear"), PackageComparisonStates.comparing)
async def cq_clear_comparison(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await state.update_data(compare=[])
    await _show(callback, session, SelectionSet())
    await callback.answer()

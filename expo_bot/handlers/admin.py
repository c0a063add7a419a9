"""
Admin overview: registration counters and the latest sponsor / delegate sign-ups.
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.keyboards import AdminPanelCb, admin_back_kb, admin_overview_kb
from expo_bot.middlewares import IsAdmin
from expo_bot.models.models import OrganizationType, PaymentMethod, PaymentPackage
from expo_bot.services import (
    count_attendees, count_marathon_entries, count_registrations,
    list_attendees, list_recent_registrations,
)
from expo_bot.utils import escape_md

logger = logging.getLogger(__name__)
router = Router(name="admin")

RECENT_LIMIT = 10


async def overview_text(session: AsyncSession) -> str:
    sponsors  = await count_registrations(session)
    delegates = await count_attendees(session)
    runners   = await count_marathon_entries(session)
    return (
        f"⚡ *Admin overview*\n\n"
        f"🏆 Sponsors: *{sponsors}*\n"
        f"👥 Delegates: *{delegates}*\n"
        f"🏃 Marathon runners: *{runners}*\n"
        f"━━━━━━━━━━━━━━━━━━━━━━\n"
        f"Total: *{sponsors + delegates + runners}*"
    )


async def recent_sponsors_text(session: AsyncSession, limit: int = RECENT_LIMIT) -> str:
    registrations = await list_recent_registrations(session, limit=limit)
    if not registrations:
        return "🏆 *Recent sponsors*\n\n_No sponsor registrations yet._"

    result = await session.execute(select(PaymentPackage.id, PaymentPackage.name))
    package_names = {pid: name for pid, name in result.all()}

    lines = [f"🏆 *Recent sponsors* (last {len(registrations)})", ""]
    for reg in registrations:
        package = package_names.get(reg.package_id, reg.package_id)
        org = OrganizationType.LABELS.get(reg.organization_type, reg.organization_type)
        payment = PaymentMethod.LABELS.get(reg.payment_method, reg.payment_method)
        lines.append(
            f"`SP-{reg.id}` *{escape_md(reg.company_name)}* ({escape_md(org)})\n"
            f"   📦 {escape_md(package)} · 💳 {payment} · 👥 {reg.delegate_count}"
        )
    return "\n".join(lines)


async def recent_attendees_text(session: AsyncSession, limit: int = RECENT_LIMIT) -> str:
    attendees = await list_attendees(session, limit=limit)
    if not attendees:
        return "👥 *Recent delegates*\n\n_No delegate registrations yet._"
    lines = [f"👥 *Recent delegates* (last {len(attendees)})", ""]
    for a in attendees:
        company = f" — {escape_md(a.company)}" if a.company else ""
        lines.append(f"`DL-{a.id}` {escape_md(a.display_name)}{company} ({a.attendance_type})")
    return "\n".join(lines)


# ── /admin ────────────────────────────────────────────────────────────────────

@router.message(Command("admin"), IsAdmin())
async def cmd_admin(message: Message, session: AsyncSession) -> None:
    await message.answer(
        await overview_text(session),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_overview_kb(),
    )


@router.callback_query(AdminPanelCb.filter(F.action == "overview"), IsAdmin())
async def cq_admin_overview(callback: CallbackQuery, session: AsyncSession) -> None:
    await callback.message.edit_text(
        await overview_text(session),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_overview_kb(),
    )
    await callback.answer()


@router.callback_query(AdminPanelCb.filter(F.action == "sponsors"), IsAdmin())
async def cq_admin_sponsors(callback: CallbackQuery, session: AsyncSession) -> None:
    await callback.message.edit_text(
        await recent_sponsors_text(session),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_back_kb(),
    )
    await callback.answer()


@router.callback_query(AdminPanelCb.filter(F.action == "attendees"), IsAdmin())
async def cq_admin_attendees(callback: CallbackQuery, session: AsyncSession) -> None:
    await callback.message.edit_text(
        await recent_attendees_text(session),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_back_kb(),
    )
    await callback.answer()

"""
Attendee service — Telegram users, delegate and marathon registrations.

All functions receive an AsyncSession parameter and are intentionally
pure async functions (no class coupling) for easy unit testing.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.models.models import (
    Attendee,
    MarathonEntry,
    RegistrationStatus,
    User,
)
from expo_bot.validators import DelegateAttendeeData, MarathonRunnerData


# ── User ──────────────────────────────────────────────────────────────────────

async def upsert_user(
    session: AsyncSession,
    telegram_id: int,
    first_name: str,
    last_name: Optional[str],
    username: Optional[str],
) -> User:
    """Create or update a Telegram user record."""
    result = await session.execute(
        select(User).where(User.telegram_id == telegram_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        user = User(
            telegram_id=telegram_id,
            first_name=first_name,
            last_name=last_name,
            username=username,
        )
        session.add(user)
        await session.flush()
    else:
        user.first_name = first_name
        user.last_name  = last_name
        user.username   = username
    return user


async def get_user(session: AsyncSession, telegram_id: int) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.telegram_id == telegram_id)
    )
    return result.scalar_one_or_none()


# ── Delegates ─────────────────────────────────────────────────────────────────

async def register_delegate(
    session: AsyncSession,
    data: DelegateAttendeeData,
) -> Tuple[Optional[Attendee], str]:
    """
    Store a delegate registration.
    Returns (attendee, error_message). error_message is empty on success.
    """
    attendee = Attendee(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        company=data.company,
        job_title=data.job_title,
        address=data.address,
        ticket_type="general",
        attendance_type=data.attendance_type,
        dietary_requirements=data.dietary_requirements,
        special_needs=data.special_needs,
        terms_accepted=data.terms_accepted,
    )
    session.add(attendee)
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        await session.rollback()
        return None, f"Registration failed: {getattr(exc, 'orig', None) or exc}"
    return attendee, ""


async def list_attendees(session: AsyncSession, limit: int = 10) -> List[Attendee]:
    result = await session.execute(
        select(Attendee).order_by(Attendee.created_at.desc(), Attendee.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


# ── Marathon ──────────────────────────────────────────────────────────────────

async def register_marathon_runner(
    session: AsyncSession,
    data: MarathonRunnerData,
) -> Tuple[Optional[MarathonEntry], str]:
    """
    Store a marathon entry with status 'pending'.
    Empty optional texts are stored as NULL.
    """
    entry = MarathonEntry(
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        date_of_birth=data.date_of_birth,
        gender=data.gender,
        emergency_contact_name=data.emergency_contact.name,
        emergency_contact_phone=data.emergency_contact.phone,
        emergency_contact_relationship=data.emergency_contact.relationship,
        race_category=data.race_category,
        t_shirt_size=data.t_shirt_size,
        previous_experience=data.previous_experience or None,
        medical_conditions=data.medical_conditions or None,
        terms_accepted=data.terms_accepted,
        liability_accepted=data.liability_accepted,
        status=RegistrationStatus.PENDING,
        completion_status="registered",
    )
    session.add(entry)
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        await session.rollback()
        return None, f"Registration failed: {getattr(exc, 'orig', None) or exc}"
    return entry, ""


# ── Counters ──────────────────────────────────────────────────────────────────

async def count_attendees(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(Attendee)) or 0


async def count_marathon_entries(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(MarathonEntry)) or 0

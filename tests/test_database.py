"""
Integration tests — Database CRUD via attendee_service.

Each test function receives a fresh in-memory SQLite database through the
`async_session` fixture defined in conftest.py.  No external services or
files are touched.

Coverage:
  - User upsert / lookup
  - Delegate registration, listing and counting
  - Marathon registration: pending status, NULL optional texts
"""
from __future__ import annotations

from datetime import date

from sqlalchemy import select

from expo_bot.models.models import MarathonEntry, RegistrationStatus, User
from expo_bot.services.attendee_service import (
    count_attendees,
    count_marathon_entries,
    get_user,
    list_attendees,
    register_delegate,
    register_marathon_runner,
    upsert_user,
)
from expo_bot.validators import DelegateAttendeeData, MarathonRunnerData


# ─────────────────────────── Helpers ──────────────────────────────────────────

def _delegate(**kwargs) -> DelegateAttendeeData:
    defaults = dict(
        first_name="Jane",
        last_name="Wanjiru",
        email="jane@example.com",
        phone="+254712345678",
        terms_accepted=True,
    )
    defaults.update(kwargs)
    return DelegateAttendeeData(**defaults)


def _runner(**kwargs) -> MarathonRunnerData:
    defaults = dict(
        full_name="John Kamau",
        email="john@example.com",
        phone="0712345678",
        date_of_birth=date(1990, 5, 17),
        gender="male",
        emergency_contact={"name": "Mary Kamau", "phone": "0722000000", "relationship": "Sister"},
        terms_accepted=True,
        liability_accepted=True,
    )
    defaults.update(kwargs)
    return MarathonRunnerData(**defaults)


# ─────────────────────────── Users ────────────────────────────────────────────

class TestUsers:

    async def test_upsert_creates(self, async_session) -> None:
        user = await upsert_user(async_session, 10001, "Jane", "Wanjiru", "jane")
        await async_session.commit()
        assert user.id is not None
        assert user.display_name == "Jane Wanjiru"

    async def test_upsert_updates_existing(self, async_session) -> None:
        await upsert_user(async_session, 10001, "Jane", None, None)
        await async_session.commit()
        await upsert_user(async_session, 10001, "Janet", "W", "janet")
        await async_session.commit()

        rows = (await async_session.execute(select(User))).scalars().all()
        assert len(rows) == 1
        assert rows[0].first_name == "Janet"
        assert rows[0].username == "janet"

    async def test_get_user(self, async_session) -> None:
        await upsert_user(async_session, 10002, "Peter", None, None)
        await async_session.commit()
        assert (await get_user(async_session, 10002)).first_name == "Peter"
        assert await get_user(async_session, 99999) is None


# ─────────────────────────── Delegates ────────────────────────────────────────

class TestDelegates:

    async def test_register(self, async_session) -> None:
        attendee, err = await register_delegate(
            async_session, _delegate(company="Acme", attendance_type="virtual")
        )
        await async_session.commit()
        assert err == ""
        assert attendee.id is not None
        assert attendee.ticket_type == "general"
        assert attendee.attendance_type == "virtual"
        assert attendee.terms_accepted is True

    async def test_list_newest_first_and_count(self, async_session) -> None:
        for first in ("Ann", "Ben", "Cal"):
            await register_delegate(async_session, _delegate(first_name=first))
        await async_session.commit()

        assert await count_attendees(async_session) == 3
        recent = await list_attendees(async_session, limit=2)
        assert [a.first_name for a in recent] == ["Cal", "Ben"]


# ─────────────────────────── Marathon ─────────────────────────────────────────

class TestMarathon:

    async def test_register_pending(self, async_session) -> None:
        entry, err = await register_marathon_runner(async_session, _runner(race_category="21K"))
        await async_session.commit()
        assert err == ""
        assert entry.status == RegistrationStatus.PENDING
        assert entry.completion_status == "registered"
        assert entry.race_category == "21K"
        assert entry.emergency_contact_relationship == "Sister"

    async def test_empty_optional_texts_stored_as_null(self, async_session) -> None:
        entry, _ = await register_marathon_runner(async_session, _runner(medical_conditions=""))
        await async_session.commit()
        stored = await async_session.get(MarathonEntry, entry.id)
        assert stored.medical_conditions is None
        assert stored.previous_experience is None

    async def test_count(self, async_session) -> None:
        assert await count_marathon_entries(async_session) == 0
        await register_marathon_runner(async_session, _runner())
        await async_session.commit()
        assert await count_marathon_entries(async_session) == 1

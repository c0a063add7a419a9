"""
Handler tests — sponsor wizard submit button (handlers/sponsor_registration.py).

Coverage:
  - success clears the wizard only after the confirmation is shown
  - a failed confirmation keeps the draft and re-enables submit
  - a press while a submit is in flight is refused
"""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage
from sqlalchemy import func, select

from expo_bot.handlers.sponsor_registration import cq_submit
from expo_bot.models.models import Registration
from expo_bot.services.draft_service import DRAFT_KEY, DraftAggregator, save_aggregator
from expo_bot.states import SponsorRegistrationStates as S


@pytest.fixture
async def wizard_state() -> FSMContext:
    state = FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=42, user_id=42),
    )
    agg = DraftAggregator()
    agg.update(
        company_name="Acme Ltd",
        country="Kenya",
        organization_type="corporation",
        full_name="Jane Wanjiru",
        job_title="CEO",
        email="jane@acme.co.ke",
        phone="+254712345678",
        package="gold",
        delegate_names=["Jane Wanjiru"],
        fascia_name="ACME",
        payment_method="mpesa",
        terms_accepted=True,
        consent_given=True,
    )
    await state.set_state(S.terms)
    await save_aggregator(state, agg)
    return state


def _callback() -> MagicMock:
    callback = MagicMock()
    callback.answer = AsyncMock()
    callback.message.answer = AsyncMock()
    callback.message.edit_text = AsyncMock()
    return callback


class TestSubmitButton:

    async def test_success_clears_wizard(self, async_session, memory_storage, wizard_state) -> None:
        callback = _callback()
        await cq_submit(callback, async_session, wizard_state, memory_storage)

        callback.message.edit_text.assert_awaited_once()
        assert "SP-" in callback.message.edit_text.await_args.args[0]
        assert await wizard_state.get_state() is None
        assert await wizard_state.get_data() == {}

    async def test_failed_confirmation_keeps_draft(
        self, async_session, memory_storage, wizard_state,
    ) -> None:
        callback = _callback()
        callback.message.edit_text.side_effect = RuntimeError("message is not modified")

        with pytest.raises(RuntimeError):
            await cq_submit(callback, async_session, wizard_state, memory_storage)

        data = await wizard_state.get_data()
        assert data[DRAFT_KEY]["draft"]["company_name"] == "Acme Ltd"
        assert data["submitting"] is False
        assert await wizard_state.get_state() == S.terms.state

    async def test_press_while_submitting_is_refused(
        self, async_session, memory_storage, wizard_state,
    ) -> None:
        await wizard_state.update_data(submitting=True)
        callback = _callback()
        await cq_submit(callback, async_session, wizard_state, memory_storage)

        callback.answer.assert_awaited_once()
        assert callback.answer.await_args.kwargs["show_alert"] is True
        count = await async_session.scalar(select(func.count()).select_from(Registration))
        assert count == 0
        assert memory_storage.objects == {}

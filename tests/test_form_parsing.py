"""
Unit tests — free-text parsing used by the marathon registration flow.
"""
from __future__ import annotations

from datetime import date

import pytest

from expo_bot.handlers.marathon_registration import parse_birth_date, parse_emergency_contact


class TestParseBirthDate:

    @pytest.mark.parametrize("text", ["17.05.1990", "17/05/1990", "1990-05-17", " 17.05.1990 "])
    def test_accepted_formats(self, text: str) -> None:
        assert parse_birth_date(text) == date(1990, 5, 17)

    @pytest.mark.parametrize("text", ["", "yesterday", "31.02.1990", "05-17-1990"])
    def test_rejected(self, text: str) -> None:
        assert parse_birth_date(text) is None


class TestParseEmergencyContact:

    def test_three_parts(self) -> None:
        assert parse_emergency_contact("Mary Kamau, 0722000000, Sister") == {
            "name": "Mary Kamau",
            "phone": "0722000000",
            "relationship": "Sister",
        }

    @pytest.mark.parametrize("text", ["Mary Kamau, 0722000000", "Mary, , Sister", "a, b, c, d"])
    def test_incomplete_rejected(self, text: str) -> None:
        assert parse_emergency_contact(text) is None

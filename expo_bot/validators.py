"""
Input validation — Pydantic v2 models and small predicate helpers.

Used to validate user-supplied text before writing to the database and to
check catalog rows at the store-read boundary.
Keeps validation logic out of handler code and makes it trivially testable.
"""
from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Any, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator, model_validator

FASCIA_MAX_LENGTH = 25
MIN_RUNNER_AGE = 18

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Kenyan mobile: +254XXXXXXXXX, 254XXXXXXXXX, 0XXXXXXXXX
_KE_PHONE_RE = re.compile(r"^(?:\+254|254|0)[17]\d{8}$")
# Any international-looking number with at least 10 digits/separators
_PHONE_RE = re.compile(r"^\+?[\d\s-]{10,}$")
_WHITESPACE_RE = re.compile(r"\s")


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_kenyan_phone(phone: str) -> bool:
    return bool(_KE_PHONE_RE.match(_WHITESPACE_RE.sub("", phone)))


def validate_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(phone))


def validate_url(url: str) -> bool:
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def validate_required(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def clamp_fascia_name(value: str) -> str:
    """Fascia boards fit 25 characters; longer input is cut, like a maxlength field."""
    return value.strip()[:FASCIA_MAX_LENGTH]


# ─────────────────────────── Catalog rows ─────────────────────────────────────

class PackageRow(BaseModel):
    """
    A `payment_packages` row as read from the store.

    Rejects rows whose `benefits` is present but not list-shaped instead of
    silently treating them as "no benefits".
    """

    id: str
    name: str
    price: Decimal
    currency: str
    description: Optional[str] = None
    benefits: list[str] = []
    slots: Optional[int] = None
    featured: bool = False
    reservation_fee: Optional[Decimal] = None

    @field_validator("benefits", mode="before")
    @classmethod
    def validate_benefits(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            raise ValueError("benefits must be a list of labels")
        return [str(item) for item in v]

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("slots cannot be negative")
        return v


# ─────────────────────────── Contact data ─────────────────────────────────────

class ContactData(BaseModel):
    """Email + phone pair shared by every registration form."""

    email: str
    phone: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if not validate_email(v):
            raise ValueError("Please enter a valid email address.")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        v = v.strip()
        if not validate_phone(v):
            raise ValueError("Please enter a valid phone number.")
        return v


class DelegateAttendeeData(ContactData):
    """
    Individual delegate registration.

    Attributes
    ----------
    first_name, last_name : required
    company, job_title, address, dietary_requirements, special_needs : optional free text
    attendance_type       : "physical" | "virtual"
    terms_accepted        : must be True
    """

    first_name: str
    last_name: str
    company: str = ""
    job_title: str = ""
    address: str = ""
    attendance_type: Literal["physical", "virtual"] = "physical"
    dietary_requirements: str = ""
    special_needs: str = ""
    terms_accepted: bool

    @field_validator("first_name", "last_name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter your full name.")
        return v

    @field_validator("terms_accepted")
    @classmethod
    def check_terms(cls, v: bool) -> bool:
        if not v:
            raise ValueError("Please accept the terms and conditions to proceed.")
        return v


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str

    @field_validator("name", "phone", "relationship")
    @classmethod
    def check_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please fill in all required fields.")
        return v


class MarathonRunnerData(ContactData):
    """
    First Lady Marathon entry.

    Age is the calendar-year difference between today and the birth date,
    so a runner born in 2008 may register from 1 January 2026.
    """

    full_name: str
    date_of_birth: date
    gender: Literal["male", "female", "other"]
    emergency_contact: EmergencyContact
    t_shirt_size: Literal["XS", "S", "M", "L", "XL", "XXL"] = "M"
    race_category: Literal["5K", "10K", "21K"] = "5K"
    previous_experience: str = ""
    medical_conditions: str = ""
    terms_accepted: bool
    liability_accepted: bool

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please fill in all required fields.")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def check_age(cls, v: date) -> date:
        if date.today().year - v.year < MIN_RUNNER_AGE:
            raise ValueError("Participants must be at least 18 years old.")
        return v

    @model_validator(mode="after")
    def check_waivers(self) -> "MarathonRunnerData":
        if not (self.terms_accepted and self.liability_accepted):
            raise ValueError(
                "Please accept both the terms and conditions and the liability waiver."
            )
        return self


def first_error_message(exc: Exception) -> str:
    """Human-readable first message of a pydantic ValidationError."""
    errors = getattr(exc, "errors", None)
    if callable(errors):
        items = errors()
        if items:
            msg = str(items[0].get("msg", ""))
            # pydantic prefixes custom ValueError messages
            return msg.removeprefix("Value error, ")
    return str(exc)

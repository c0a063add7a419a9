"""
ORM models for the Regional Expo registration bot.

Domain overview
---------------
User            — Telegram user who opened the bot
PaymentPackage  — sponsorship tier (price, benefits, slot capacity)
Registration    — sponsor registration built by the multi-step wizard
Attendee        — individual delegate registration
MarathonEntry   — First Lady Marathon runner registration
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from expo_bot.models.base import Base

# ─────────────────────────── Constants ────────────────────────────────────────

class RegistrationType:
    DELEGATE = "delegate"
    MARATHON = "marathon"
    SPONSOR  = "sponsor"

    LABELS = {
        DELEGATE: "Delegate Registration",
        MARATHON: "First Lady Marathon",
        SPONSOR:  "Sponsorship Registration",
    }

    PRICES = {
        DELEGATE: "KES 15,000",
        MARATHON: "KES 2,000",
        SPONSOR:  "Starting from KES 100,000",
    }


class OrganizationType:
    LABELS = {
        "corporation": "Corporation",
        "sme":         "Small/Medium Enterprise (SME)",
        "ngo":         "Non-Governmental Organization (NGO)",
        "government":  "Government Agency",
        "cbo":         "Community-Based Organization (CBO)",
        "startup":     "Startup",
        "academic":    "Academic/Research Institution",
        "other":       "Other",
    }


class PaymentMethod:
    BANK  = "bank"
    MPESA = "mpesa"
    CARD  = "card"
    OTHER = "other"

    LABELS = {
        BANK:  "Bank Transfer",
        MPESA: "M-Pesa",
        CARD:  "Credit/Debit Card",
        OTHER: "Other Payment Methods",
    }

    INSTRUCTIONS = {
        BANK:  "Bank details will be sent to your email",
        MPESA: "M-Pesa Paybill details will be provided",
        CARD:  "You will be redirected to our secure payment gateway",
        OTHER: "Our team will reach out to discuss options",
    }


class AttendanceType:
    PHYSICAL = "physical"
    VIRTUAL  = "virtual"

    LABELS = {
        PHYSICAL: "🏛 Physical",
        VIRTUAL:  "💻 Virtual",
    }


class RaceCategory:
    LABELS = {
        "5K":  "5 km Fun Run",
        "10K": "10 km Race",
        "21K": "Half Marathon (21 km)",
    }


class TShirtSize:
    ALL = ["XS", "S", "M", "L", "XL", "XXL"]


class RegistrationStatus:
    PENDING   = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


def _new_package_id() -> str:
    return str(uuid.uuid4())


# ─────────────────────────── Models ───────────────────────────────────────────

class User(Base):
    """Telegram user."""
    __tablename__ = "users"

    id:          Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    telegram_id: Mapped[int]           = mapped_column(BigInteger, unique=True, index=True)
    username:    Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name:  Mapped[str]           = mapped_column(String(255))
    last_name:   Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at:  Mapped[datetime]      = mapped_column(DateTime, default=func.now())

    @property
    def display_name(self) -> str:
        parts = [self.first_name]
        if self.last_name:
            parts.append(self.last_name)
        return " ".join(parts)


class PaymentPackage(Base):
    """
    A sponsorship tier.

    `benefits` is stored as JSON and is expected to be a list of labels;
    rows are validated on read (see services.package_service).
    """
    __tablename__ = "payment_packages"

    id:              Mapped[str]               = mapped_column(String(64), primary_key=True, default=_new_package_id)
    name:            Mapped[str]               = mapped_column(String(255))
    price:           Mapped[Decimal]           = mapped_column(Numeric(14, 2))
    currency:        Mapped[str]               = mapped_column(String(8), default="KES")
    description:     Mapped[Optional[str]]     = mapped_column(Text, nullable=True)
    benefits:        Mapped[Optional[Any]]     = mapped_column(JSON, nullable=True)
    slots:           Mapped[Optional[int]]     = mapped_column(Integer, nullable=True)   # None = unlimited
    featured:        Mapped[bool]              = mapped_column(Boolean, default=False)
    reservation_fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    active:          Mapped[bool]              = mapped_column(Boolean, default=True, index=True)
    created_at:      Mapped[datetime]          = mapped_column(DateTime, default=func.now())


class Registration(Base):
    """Sponsor registration — one row per completed wizard."""
    __tablename__ = "registrations"

    id:                Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)

    company_name:      Mapped[str]           = mapped_column(String(255))
    company_website:   Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    country:           Mapped[str]           = mapped_column(String(100))
    organization_type: Mapped[str]           = mapped_column(String(30))
    company_logo_url:  Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    contact_name:      Mapped[str]           = mapped_column(String(255))
    contact_job_title: Mapped[str]           = mapped_column(String(255))
    contact_email:     Mapped[str]           = mapped_column(String(255))
    contact_phone:     Mapped[str]           = mapped_column(String(50))

    package_id:        Mapped[str]           = mapped_column(String(64))

    delegate_count:    Mapped[int]           = mapped_column(Integer, default=1)
    delegate_names:    Mapped[list]          = mapped_column(JSON, default=list)

    fascia_name:       Mapped[str]           = mapped_column(String(25))
    social_media:      Mapped[dict]          = mapped_column(JSON, default=dict)

    payment_method:    Mapped[str]           = mapped_column(String(20))

    terms_accepted:    Mapped[bool]          = mapped_column(Boolean, default=False)
    consent_given:     Mapped[bool]          = mapped_column(Boolean, default=False)

    status:            Mapped[str]           = mapped_column(String(20), default=RegistrationStatus.PENDING)
    created_at:        Mapped[datetime]      = mapped_column(DateTime, default=func.now())

    def as_dict(self) -> dict[str, Any]:
        return {c.name: getattr(self, c.key) for c in self.__table__.columns}


class Attendee(Base):
    """Delegate registration."""
    __tablename__ = "attendees"

    id:                   Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name:           Mapped[str]           = mapped_column(String(255))
    last_name:            Mapped[str]           = mapped_column(String(255))
    email:                Mapped[str]           = mapped_column(String(255))
    phone:                Mapped[str]           = mapped_column(String(50))
    company:              Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    job_title:            Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address:              Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    ticket_type:          Mapped[str]           = mapped_column(String(20), default="general")
    attendance_type:      Mapped[str]           = mapped_column(String(20), default=AttendanceType.PHYSICAL)
    dietary_requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    special_needs:        Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    terms_accepted:       Mapped[bool]          = mapped_column(Boolean, default=False)
    created_at:           Mapped[datetime]      = mapped_column(DateTime, default=func.now())

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class MarathonEntry(Base):
    """First Lady Marathon runner."""
    __tablename__ = "marathon_registrations"

    id:                             Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name:                      Mapped[str]           = mapped_column(String(255))
    email:                          Mapped[str]           = mapped_column(String(255))
    phone:                          Mapped[str]           = mapped_column(String(50))
    date_of_birth:                  Mapped[date]          = mapped_column(Date)
    gender:                         Mapped[str]           = mapped_column(String(10))
    emergency_contact_name:         Mapped[str]           = mapped_column(String(255))
    emergency_contact_phone:        Mapped[str]           = mapped_column(String(50))
    emergency_contact_relationship: Mapped[str]           = mapped_column(String(100))
    race_category:                  Mapped[str]           = mapped_column(String(5))
    t_shirt_size:                   Mapped[str]           = mapped_column(String(5))
    previous_experience:            Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    medical_conditions:             Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    terms_accepted:                 Mapped[bool]          = mapped_column(Boolean, default=False)
    liability_accepted:             Mapped[bool]          = mapped_column(Boolean, default=False)
    status:                         Mapped[str]           = mapped_column(String(20), default=RegistrationStatus.PENDING)
    completion_status:              Mapped[str]           = mapped_column(String(20), default="registered")
    created_at:                     Mapped[datetime]      = mapped_column(DateTime, default=func.now())

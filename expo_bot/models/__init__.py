from expo_bot.models.base import Base, engine, AsyncSessionFactory
from expo_bot.models.models import (
    User,
    PaymentPackage,
    Registration,
    Attendee,
    MarathonEntry,
    RegistrationType,
    OrganizationType,
    PaymentMethod,
    AttendanceType,
    RaceCategory,
    TShirtSize,
    RegistrationStatus,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionFactory",
    "User",
    "PaymentPackage",
    "Registration",
    "Attendee",
    "MarathonEntry",
    "RegistrationType",
    "OrganizationType",
    "PaymentMethod",
    "AttendanceType",
    "RaceCategory",
    "TShirtSize",
    "RegistrationStatus",
]

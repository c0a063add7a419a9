"""
Package catalog — reads active sponsorship tiers from `payment_packages`.

Rows are validated through `PackageRow` at the read boundary and projected
to the immutable `Package` value type used by keyboards and the comparison
matrix.  `PackageCatalog` wraps one load with loading / loaded / errored
state for the handlers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from expo_bot.models.models import PaymentPackage
from expo_bot.utils import format_currency, price_to_string
from expo_bot.validators import PackageRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Package:
    """Read-only projection of a catalog row."""
    id: str
    name: str
    price: str                        # display string, e.g. "100000" or "1000.5"
    currency: str
    description: str
    benefits: tuple[str, ...]
    slots: Optional[int]              # None = unlimited
    featured: bool
    reservation_fee: Optional[Decimal] = None

    @property
    def display_price(self) -> str:
        return format_currency(self.price, self.currency)

    @property
    def display_reservation_fee(self) -> Optional[str]:
        if self.reservation_fee is None:
            return None
        return format_currency(self.reservation_fee, self.currency)

    @property
    def slots_label(self) -> str:
        return "Unlimited" if self.slots is None else f"{self.slots} slots"


def to_package(row: PackageRow) -> Package:
    return Package(
        id=row.id,
        name=row.name,
        price=price_to_string(row.price),
        currency=row.currency,
        description=row.description or "",
        benefits=tuple(row.benefits),
        slots=row.slots,
        featured=row.featured,
        reservation_fee=row.reservation_fee,
    )


def _row_to_mapping(pkg: PaymentPackage) -> dict:
    return {
        "id":              pkg.id,
        "name":            pkg.name,
        "price":           pkg.price,
        "currency":        pkg.currency,
        "description":     pkg.description,
        "benefits":        pkg.benefits,
        "slots":           pkg.slots,
        "featured":        pkg.featured,
        "reservation_fee": pkg.reservation_fee,
    }


# ── Queries ───────────────────────────────────────────────────────────────────

async def fetch_active_packages(session: AsyncSession) -> List[Package]:
    """
    Active packages ordered by price, most expensive first.
    Rows that fail validation are logged and left out.
    """
    result = await session.execute(
        select(PaymentPackage)
        .where(PaymentPackage.active.is_(True))
        .order_by(PaymentPackage.price.desc())
    )
    packages: List[Package] = []
    for raw in result.scalars().all():
        try:
            row = PackageRow.model_validate(_row_to_mapping(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed package %s: %s", raw.id, exc)
            continue
        packages.append(to_package(row))
    return packages


async def get_package(session: AsyncSession, package_id: str) -> Optional[Package]:
    raw = await session.get(PaymentPackage, package_id)
    if raw is None:
        return None
    try:
        return to_package(PackageRow.model_validate(_row_to_mapping(raw)))
    except ValidationError as exc:
        logger.warning("Package %s is malformed: %s", package_id, exc)
        return None


class CatalogStatus:
    LOADING = "loading"
    LOADED  = "loaded"
    ERRORED = "errored"


class PackageCatalog:
    """
    One catalog fetch with observable state.

    status starts as LOADING and ends in LOADED (possibly with an empty list)
    or ERRORED with `error` holding the message.  There is no retry; a new
    catalog is created when the user opens the screen again.
    """

    def __init__(self) -> None:
        self.status: str = CatalogStatus.LOADING
        self.packages: List[Package] = []
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status == CatalogStatus.LOADING

    async def load(self, session: AsyncSession) -> "PackageCatalog":
        try:
            self.packages = await fetch_active_packages(session)
            self.status = CatalogStatus.LOADED
        except Exception as exc:
            logger.exception("Error fetching packages")
            self.error = str(exc) or "Failed to load packages"
            self.status = CatalogStatus.ERRORED
        return self

    def find(self, package_id: str) -> Optional[Package]:
        return next((p for p in self.packages if p.id == package_id), None)


# ── Seed data ─────────────────────────────────────────────────────────────────

DEFAULT_PACKAGES: list[dict] = [
    {
        "name": "Platinum",
        "price": Decimal("1000000"),
        "currency": "KES",
        "description": "Headline partner of the expo",
        "benefits": [
            "Premium exhibition booth (6x6m)",
            "Logo on all event materials",
            "Keynote speaking slot",
            "10 delegate passes",
            "VIP gala breakfast table",
        ],
        "slots": 1,
        "featured": True,
        "reservation_fee": Decimal("30000"),
    },
    {
        "name": "Gold",
        "price": Decimal("500000"),
        "currency": "KES",
        "description": "High-visibility partnership",
        "benefits": [
            "Exhibition booth (3x6m)",
            "Logo on all event materials",
            "Panel speaking slot",
            "5 delegate passes",
        ],
        "slots": 3,
        "featured": False,
        "reservation_fee": Decimal("30000"),
    },
    {
        "name": "Silver",
        "price": Decimal("250000"),
        "currency": "KES",
        "description": "Exhibit and network",
        "benefits": [
            "Exhibition booth (3x3m)",
            "Logo on event website",
            "3 delegate passes",
        ],
        "slots": None,
        "featured": False,
        "reservation_fee": Decimal("30000"),
    },
    {
        "name": "Bronze",
        "price": Decimal("100000"),
        "currency": "KES",
        "description": "Entry-level brand presence",
        "benefits": [
            "Shared exhibition space",
            "Logo on event website",
            "1 delegate pass",
        ],
        "slots": None,
        "featured": False,
        "reservation_fee": Decimal("30000"),
    },
]


async def seed_default_packages(session: AsyncSession) -> int:
    """Insert the stock tiers when the catalog table is empty. Returns rows added."""
    count = await session.scalar(select(func.count()).select_from(PaymentPackage))
    if count:
        return 0
    session.add_all([PaymentPackage(**tier) for tier in DEFAULT_PACKAGES])
    await session.flush()
    logger.info("Seeded %d default sponsorship packages.", len(DEFAULT_PACKAGES))
    return len(DEFAULT_PACKAGES)

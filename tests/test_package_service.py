"""
Integration tests — package catalog loader (package_service.py).

Each test receives a fresh in-memory SQLite database through the
`async_session` fixture defined in conftest.py.

Coverage:
  - active filter and price-descending order
  - benefits shape checked at the read boundary
  - price / reservation fee projection
  - PackageCatalog loaded / errored states
  - default tier seeding
"""
from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from expo_bot.models.models import PaymentPackage
from expo_bot.services.package_service import (
    DEFAULT_PACKAGES,
    CatalogStatus,
    PackageCatalog,
    fetch_active_packages,
    get_package,
    seed_default_packages,
)


# ─────────────────────────── fetch_active_packages ────────────────────────────

class TestFetchActivePackages:

    async def test_ordered_by_price_descending(self, async_session, add_package) -> None:
        await add_package("Silver", "250000")
        await add_package("Platinum", "1000000")
        await add_package("Gold", "500000")
        packages = await fetch_active_packages(async_session)
        assert [p.name for p in packages] == ["Platinum", "Gold", "Silver"]

    async def test_inactive_packages_hidden(self, async_session, add_package) -> None:
        await add_package("Gold", "500000")
        await add_package("Retired", "750000", active=False)
        packages = await fetch_active_packages(async_session)
        assert [p.name for p in packages] == ["Gold"]

    async def test_empty_table(self, async_session) -> None:
        assert await fetch_active_packages(async_session) == []

    async def test_null_benefits_become_empty(self, async_session, add_package) -> None:
        await add_package("Bronze", "100000", benefits=None)
        (pkg,) = await fetch_active_packages(async_session)
        assert pkg.benefits == ()

    async def test_malformed_benefits_row_skipped(self, async_session, add_package) -> None:
        await add_package("Gold", "500000", benefits=["Booth"])
        await add_package("Broken", "400000", benefits="Booth, Logo")
        packages = await fetch_active_packages(async_session)
        assert [p.name for p in packages] == ["Gold"]

    async def test_price_projection(self, async_session, add_package) -> None:
        await add_package("Gold", "500000.00", reservation_fee=Decimal("30000"), slots=3, featured=True)
        (pkg,) = await fetch_active_packages(async_session)
        assert pkg.price == "500000"
        assert pkg.display_price == "KES 500,000"
        assert pkg.display_reservation_fee == "KES 30,000"
        assert pkg.slots_label == "3 slots"
        assert pkg.featured is True

    async def test_unlimited_slots_label(self, async_session, add_package) -> None:
        await add_package("Silver", "250000")
        (pkg,) = await fetch_active_packages(async_session)
        assert pkg.slots_label == "Unlimited"
        assert pkg.display_reservation_fee is None


class TestGetPackage:

    async def test_found(self, async_session, add_package) -> None:
        row = await add_package("Gold", "500000", benefits=["Booth"])
        pkg = await get_package(async_session, row.id)
        assert pkg is not None
        assert pkg.benefits == ("Booth",)

    async def test_missing(self, async_session) -> None:
        assert await get_package(async_session, "no-such-id") is None


# ─────────────────────────── PackageCatalog ───────────────────────────────────

class TestPackageCatalog:

    async def test_initial_state_is_loading(self) -> None:
        catalog = PackageCatalog()
        assert catalog.loading
        assert catalog.packages == []
        assert catalog.error is None

    async def test_loaded(self, async_session, add_package) -> None:
        await add_package("Gold", "500000")
        catalog = await PackageCatalog().load(async_session)
        assert catalog.status == CatalogStatus.LOADED
        assert catalog.find(catalog.packages[0].id).name == "Gold"
        assert catalog.find("missing") is None

    async def test_loaded_empty(self, async_session) -> None:
        catalog = await PackageCatalog().load(async_session)
        assert catalog.status == CatalogStatus.LOADED
        assert catalog.packages == []

    async def test_store_error_sets_errored(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        catalog = await PackageCatalog().load(session)
        assert catalog.status == CatalogStatus.ERRORED
        assert "connection refused" in catalog.error
        assert catalog.packages == []

    async def test_blank_error_message_gets_default(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = RuntimeError()
        catalog = await PackageCatalog().load(session)
        assert catalog.error == "Failed to load packages"


# ─────────────────────────── Seeding ──────────────────────────────────────────

class TestSeedDefaultPackages:

    async def test_seeds_empty_table(self, async_session) -> None:
        added = await seed_default_packages(async_session)
        assert added == len(DEFAULT_PACKAGES)
        packages = await fetch_active_packages(async_session)
        assert [p.name for p in packages] == ["Platinum", "Gold", "Silver", "Bronze"]

    async def test_does_not_reseed(self, async_session, add_package) -> None:
        await add_package("Custom", "42000")
        assert await seed_default_packages(async_session) == 0
        count = await async_session.scalar(select(func.count()).select_from(PaymentPackage))
        assert count == 1

"""
Shared pytest fixtures for the expo registration bot tests.

Sets required environment variables BEFORE any expo_bot module is imported so
that pydantic-settings and SQLAlchemy engine initialisation use safe test values.
"""
from __future__ import annotations

import os
import tempfile
from decimal import Decimal
from typing import AsyncGenerator, Optional

# ── Set env vars before any expo_bot import ───────────────────────────────────
os.environ.setdefault("BOT_TOKEN", "test-token-for-pytest")
os.environ.setdefault("ADMIN_IDS", "123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_DIR", tempfile.gettempdir())

# ── Third-party ───────────────────────────────────────────────────────────────
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# ── Project imports (safe after env vars are set) ─────────────────────────────
from expo_bot.models.base import Base
from expo_bot.models.models import PaymentPackage
from expo_bot.services.package_service import Package
from expo_bot.services.storage_service import StorageError, StoredFile


# ── DB fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a fresh AsyncSession backed by an isolated in-memory SQLite database.
    Schema is created fresh for every test function; engine is always disposed
    on teardown, even if the test raises an exception.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            yield session
    finally:
        await engine.dispose()


@pytest.fixture
def add_package(async_session: AsyncSession):
    """Factory fixture — inserts a payment_packages row and returns it."""

    async def _add(
        name: str,
        price: str,
        benefits=None,
        active: bool = True,
        **kwargs,
    ) -> PaymentPackage:
        pkg = PaymentPackage(
            name=name,
            price=Decimal(price),
            currency=kwargs.pop("currency", "KES"),
            benefits=benefits,
            active=active,
            **kwargs,
        )
        async_session.add(pkg)
        await async_session.flush()
        return pkg

    return _add


# ── Storage fakes ─────────────────────────────────────────────────────────────

class InMemoryStorage:
    """In-memory bucket storage that records every upload."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}

    async def upload(self, bucket: str, key: str, content: bytes) -> StoredFile:
        self.objects[(bucket, key)] = content
        return StoredFile(bucket=bucket, path=key)


class FailingStorage:
    """Storage whose every upload fails with the given message."""

    def __init__(self, message: str = "Bucket not found", exc_type: type = StorageError) -> None:
        self.message = message
        self.exc_type = exc_type
        self.calls = 0

    async def upload(self, bucket: str, key: str, content: bytes) -> StoredFile:
        self.calls += 1
        raise self.exc_type(self.message)


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def failing_storage_factory():
    """Factory fixture: builds a FailingStorage raising the given exception type."""
    return FailingStorage


# ── Value helpers ─────────────────────────────────────────────────────────────

def make_package(
    pid: str,
    benefits: tuple[str, ...] = (),
    name: Optional[str] = None,
    price: str = "100000",
    featured: bool = False,
) -> Package:
    return Package(
        id=pid,
        name=name or pid.capitalize(),
        price=price,
        currency="KES",
        description="",
        benefits=tuple(benefits),
        slots=None,
        featured=featured,
    )


@pytest.fixture
def package_factory():
    """Factory fixture — returns a callable that builds a Package value."""
    return make_package

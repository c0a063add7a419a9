"""
Central configuration via pydantic-settings.
All secrets are read from environment variables / .env file.
"""
from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Telegram ──────────────────────────────────────────────────────────────
    BOT_TOKEN: str

    # Raw comma-separated admin IDs, e.g. "123,456"
    ADMIN_IDS: str = ""

    # ── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./expo.db"

    # Insert the stock sponsorship tiers when payment_packages is empty
    SEED_PACKAGES: bool = True

    @property
    def async_database_url(self) -> str:
        """
        Hosted Postgres usually hands out 'postgresql://...'
        SQLAlchemy async requires 'postgresql+asyncpg://...'
        This property fixes the prefix automatically.
        """
        url = self.DATABASE_URL
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url

    # ── File storage ──────────────────────────────────────────────────────────
    STORAGE_DIR: str = "./storage"
    LOGO_BUCKET: str = "company-logos"
    MAX_LOGO_SIZE_MB: int = 5

    # ─────────────────────────────────────────────────────────────────────────

    @property
    def admin_ids_list(self) -> list[int]:
        """Parse ADMIN_IDS env var to a list of integers."""
        if not self.ADMIN_IDS:
            return []
        return [int(x.strip()) for x in self.ADMIN_IDS.split(",") if x.strip().isdigit()]

    @property
    def storage_path(self) -> Path:
        return Path(self.STORAGE_DIR)

    @property
    def max_logo_bytes(self) -> int:
        return self.MAX_LOGO_SIZE_MB * 1024 * 1024


settings = Settings()

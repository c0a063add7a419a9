"""
Regional Climate Change & AgriExpo — registration bot.
Entry point: creates the bot, registers routers + middleware, handles graceful shutdown.
"""
import asyncio
import logging
import signal
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import ErrorEvent

from expo_bot.config import settings
from expo_bot.middlewares import AdminMiddleware, DatabaseMiddleware
from expo_bot.models.base import AsyncSessionFactory, Base, engine
from expo_bot.services import LocalFileStorage, seed_default_packages

# ── Handlers ──────────────────────────────────────────────────────────────────
from expo_bot.handlers.common import router as common_router
from expo_bot.handlers.packages import router as packages_router
from expo_bot.handlers.sponsor_registration import router as sponsor_registration_router
from expo_bot.handlers.delegate_registration import router as delegate_registration_router
from expo_bot.handlers.marathon_registration import router as marathon_registration_router
from expo_bot.handlers.admin import router as admin_router
from expo_bot.handlers.fallback import router as fallback_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


async def create_tables() -> None:
    """Create all database tables on startup and seed the package catalog."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        if settings.SEED_PACKAGES:
            async with AsyncSessionFactory() as session:
                await seed_default_packages(session)
                await session.commit()
        logger.info("Database tables ready.")
    except Exception as e:
        logger.critical(
            "❌ Cannot connect to database!\n"
            "   URL: %s\n"
            "   Error: %s\n\n"
            "   → Locally: use SQLite (DATABASE_URL=sqlite+aiosqlite:///./expo.db)",
            settings.DATABASE_URL.split("@")[-1],   # hide credentials in log
            e,
        )
        sys.exit(1)


def build_dispatcher() -> Dispatcher:
    dp = Dispatcher(storage=MemoryStorage())

    # Injected into handlers as the `file_storage` argument
    dp["file_storage"] = LocalFileStorage(settings.storage_path)

    # ── Global error handler: callbacks are always answered ───────────────────
    @dp.errors()
    async def handle_error(event: ErrorEvent) -> None:
        logger.exception("Unhandled error: %s", event.exception)
        update = event.update
        if update.callback_query:
            try:
                await update.callback_query.answer(
                    "⚠️ Something went wrong. Please try again.", show_alert=True
                )
            except Exception:
                pass

    # ── Global middlewares ────────────────────────────────────────────────────
    dp.update.middleware(DatabaseMiddleware())
    dp.update.middleware(AdminMiddleware())

    # ── Routers: order matters for handler priority ───────────────────────────
    dp.include_router(common_router)
    dp.include_router(packages_router)
    dp.include_router(sponsor_registration_router)
    dp.include_router(delegate_registration_router)
    dp.include_router(marathon_registration_router)
    dp.include_router(admin_router)

    # !! Must be last: catches any callback not handled above !!
    dp.include_router(fallback_router)

    return dp


async def main() -> None:
    logger.info("Starting expo registration bot…")
    await create_tables()

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.MARKDOWN),
    )
    dp = build_dispatcher()

    # ── Graceful shutdown on SIGTERM (Docker / PaaS) ──────────────────────────
    loop = asyncio.get_running_loop()

    def _handle_signal():
        logger.info("Received shutdown signal, stopping…")
        asyncio.ensure_future(dp.stop_polling())

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal)
        except NotImplementedError:
            # Windows does not support add_signal_handler
            pass

    try:
        logger.info("Bot is running. Press Ctrl+C to stop.")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            handle_signals=False,
        )
    finally:
        logger.info("Shutting down…")
        await bot.session.close()
        await engine.dispose()
        logger.info("Shutdown complete.")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

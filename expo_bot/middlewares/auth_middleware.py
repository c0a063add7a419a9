"""
Admin authorization middleware.

Attaches `is_admin: bool` to handler data for every update, based on the
ADMIN_IDS setting. The IsAdmin filter (below) guards the admin handlers.
"""
from typing import Any, Awaitable, Callable, Dict, Union

from aiogram import BaseMiddleware
from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message, TelegramObject

from expo_bot.config import settings

ACCESS_DENIED = "⛔️ Access denied."


class AdminMiddleware(BaseMiddleware):
    """Injects the `is_admin` flag; access is restricted per handler via IsAdmin."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user = data.get("event_from_user")
        data["is_admin"] = bool(user and user.id in settings.admin_ids_list)
        return await handler(event, data)


# ── Reusable filter ──────────────────────────────────────────────────────────

class IsAdmin(BaseFilter):
    """Passes for admins; answers everyone else with an access-denied notice."""

    async def __call__(self, event: Union[Message, CallbackQuery], is_admin: bool = False) -> bool:
        if not is_admin:
            if isinstance(event, Message):
                await event.answer(ACCESS_DENIED)
            elif isinstance(event, CallbackQuery):
                await event.answer(ACCESS_DENIED, show_alert=True)
        return is_admin

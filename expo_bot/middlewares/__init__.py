from expo_bot.middlewares.db_middleware import DatabaseMiddleware
from expo_bot.middlewares.auth_middleware import AdminMiddleware, IsAdmin

__all__ = ["DatabaseMiddleware", "AdminMiddleware", "IsAdmin"]

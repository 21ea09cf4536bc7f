from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message

from tracker.core import sessions


class AuthMiddleware(BaseMiddleware):
    """Expose the logged-in role of the sender as ``role`` (None when logged out)."""

    async def __call__(
        self,
        handler: Callable[[Message, Dict[str, Any]], Awaitable[Any]],
        event: Any,
        data: Dict[str, Any],
    ) -> Any:
        tg_user = None
        if isinstance(event, (Message, CallbackQuery)):
            tg_user = event.from_user
        if tg_user:
            data["role"] = sessions.current_role(str(tg_user.id))
        else:
            data["role"] = None
        return await handler(event, data)

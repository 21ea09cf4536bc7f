import asyncio
import logging

from aiogram import Bot, Dispatcher

from tracker.bot.commands_admin import router as admin_router
from tracker.bot.commands_login import router as login_router
from tracker.bot.commands_student import router as student_router
from tracker.bot.middleware.auth_mw import AuthMiddleware
from tracker.core import settings_store
from tracker.core.cleanup import periodic_cleanup
from tracker.core.config import cfg
from tracker.core.logging import setup_logging

logger = logging.getLogger(__name__)


def build_dispatcher() -> Dispatcher:
    dp = Dispatcher()
    dp.message.middleware(AuthMiddleware())
    dp.callback_query.middleware(AuthMiddleware())
    # Order matters: admin handlers skip non-admins so the student router sees them
    dp.include_router(login_router)
    dp.include_router(admin_router)
    dp.include_router(student_router)
    return dp


async def main():
    setup_logging(logging.INFO)
    if not cfg.telegram_token:
        raise SystemExit("TELEGRAM_TOKEN is not set")
    settings_store.initialize()
    bot = Bot(cfg.telegram_token)
    dp = build_dispatcher()
    logger.info("bot starting env=%s db=%s", cfg.app_env, cfg.sqlite_path)

    asyncio.create_task(periodic_cleanup())
    await dp.start_polling(bot)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

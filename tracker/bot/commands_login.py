import logging
from typing import Optional

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from tracker.core import sessions
from tracker.core.roles import ADMIN, STUDENT, parse_role

logger = logging.getLogger(__name__)

router = Router(name="login")

INCORRECT_PASSWORD = "Incorrect password."

WELCOME = (
    "<b>English Tracker</b>\n"
    "Log in to continue:\n"
    "/login student &lt;password&gt;\n"
    "/login admin &lt;password&gt;"
)

ADMIN_HELP = (
    "<b>Admin</b>\n"
    "/weeks, /week &lt;n&gt;, /newweek &lt;title&gt;\n"
    "/tasks, /addtask &lt;text&gt;, /deltask &lt;n&gt;, /suggest\n"
    "/report, /listen\n"
    "/passwords &lt;admin&gt; &lt;student&gt;, /reset\n"
    "/logout"
)

STUDENT_HELP = (
    "<b>Student</b>\n"
    "/weeks, /week &lt;n&gt;\n"
    "/tasks to tick off this week's tasks\n"
    "Send a voice message to attach a recording\n"
    "/submit to send the week to your teacher\n"
    "/logout"
)


def help_text(role: Optional[str]) -> str:
    if role == ADMIN:
        return ADMIN_HELP
    if role == STUDENT:
        return STUDENT_HELP
    return WELCOME


@router.message(Command("start", "help"))
async def cmd_start(msg: Message, role: Optional[str] = None):
    await msg.answer(help_text(role), parse_mode="HTML")


@router.message(Command("login"))
async def cmd_login(msg: Message, role: Optional[str] = None):
    parts = (msg.text or "").split(maxsplit=2)
    target = parse_role(parts[1]) if len(parts) > 1 else None
    if target is None or len(parts) < 3:
        return await msg.answer("usage: /login <admin|student> <password>")
    tg_id = str(msg.from_user.id)
    logger.info("/login called by tg_id=%s role=%s", tg_id, target)
    if not sessions.login(tg_id, target, parts[2]):
        return await msg.answer(INCORRECT_PASSWORD)
    await msg.answer(help_text(target), parse_mode="HTML")


@router.message(Command("logout"))
async def cmd_logout(msg: Message, role: Optional[str] = None):
    sessions.logout(str(msg.from_user.id))
    await msg.answer("Logged out.")

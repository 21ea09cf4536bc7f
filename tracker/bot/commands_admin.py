from __future__ import annotations

import html
import logging
from typing import Optional

from aiogram import Router
from aiogram.dispatcher.event.bases import SkipHandler
from aiogram.filters import Command
from aiogram.types import BufferedInputFile, Message

from tracker.core import sessions, settings_store
from tracker.core.audio import filename_for, from_data_uri, sha256_bytes
from tracker.core.errors import ValidationError
from tracker.core.kv_store import clear_all
from tracker.core.reports import format_report, week_report
from tracker.core.roles import ADMIN
from tracker.core.submissions_repo import get_submission_for_week
from tracker.core.tasks_repo import (
    add_task,
    add_tasks,
    delete_task,
    list_tasks_for_week,
)
from tracker.core.weeks_repo import create_week, list_weeks, validate_week_title
from tracker.services import suggestions

logger = logging.getLogger(__name__)

router = Router(name="admin")

FORBIDDEN = "forbidden: admin only"


def _arg(msg: Message) -> str:
    parts = (msg.text or "").split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


def _tg(msg: Message) -> str:
    return str(msg.from_user.id)


def weeks_text(selected_id: Optional[str]) -> str:
    lines = ["<b>Weeks</b> (newest first):"]
    for i, w in enumerate(list_weeks(), start=1):
        mark = "▶️" if w.id == selected_id else "•"
        lines.append(f"{mark} {i}. {html.escape(w.title)}")
    lines.append("Select with /week &lt;n&gt;, add with /newweek &lt;title&gt;")
    return "\n".join(lines)


def tasks_text(week_id: str, week_title: str) -> str:
    tasks = list_tasks_for_week(week_id)
    if not tasks:
        return (
            f"No tasks added for {html.escape(week_title)}. "
            "Use /addtask or /suggest."
        )
    lines = [f"<b>Tasks: {html.escape(week_title)}</b>"]
    lines.extend(f"{i}. {html.escape(t.text)}" for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


@router.message(Command("weeks"))
async def admin_weeks(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        raise SkipHandler()
    week = sessions.selected_week(_tg(msg))
    await msg.answer(weeks_text(week.id), parse_mode="HTML")


@router.message(Command("newweek"))
async def admin_new_week(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    try:
        title = validate_week_title(_arg(msg))
    except ValidationError:
        return await msg.answer("Week title must not be empty: /newweek <title>")
    week = create_week(title)
    sessions.select_week(_tg(msg), week.id)
    await msg.answer(
        f"Week created and selected: {html.escape(week.title)}", parse_mode="HTML"
    )


@router.message(Command("week"))
async def admin_select_week(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        raise SkipHandler()
    raw = _arg(msg)
    week = sessions.week_by_position(int(raw)) if raw.isdigit() else None
    if week is None:
        return await msg.answer("usage: /week <n> (see /weeks)")
    sessions.select_week(_tg(msg), week.id)
    await msg.answer(tasks_text(week.id, week.title), parse_mode="HTML")


@router.message(Command("tasks"))
async def admin_tasks(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        raise SkipHandler()
    week = sessions.selected_week(_tg(msg))
    await msg.answer(tasks_text(week.id, week.title), parse_mode="HTML")


@router.message(Command("addtask"))
async def admin_add_task(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    text = _arg(msg)
    if not text:
        return await msg.answer("usage: /addtask <text>")
    week = sessions.selected_week(_tg(msg))
    add_task(week.id, text)
    await msg.answer(tasks_text(week.id, week.title), parse_mode="HTML")


@router.message(Command("deltask"))
async def admin_delete_task(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    week = sessions.selected_week(_tg(msg))
    tasks = list_tasks_for_week(week.id)
    raw = _arg(msg)
    if not raw.isdigit() or not 1 <= int(raw) <= len(tasks):
        return await msg.answer("usage: /deltask <n> (see /tasks)")
    delete_task(week.id, tasks[int(raw) - 1].id)
    await msg.answer(tasks_text(week.id, week.title), parse_mode="HTML")


@router.message(Command("suggest"))
async def admin_suggest(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    # Week is fixed before the await; later selection changes do not apply
    week = sessions.selected_week(_tg(msg))
    await msg.answer("Generating suggestions…")
    texts = await suggestions.suggest(
        suggestions.DEFAULT_SUBJECT, suggestions.DEFAULT_AGE_GROUP
    )
    created = add_tasks(week.id, texts)
    logger.info("admin suggest: week=%s added=%d", week.id, len(created))
    await msg.answer(tasks_text(week.id, week.title), parse_mode="HTML")


@router.message(Command("report"))
async def admin_report(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    week = sessions.selected_week(_tg(msg))
    await msg.answer(format_report(week_report(week.id), week.title), parse_mode="HTML")


@router.message(Command("listen"))
async def admin_listen(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    week = sessions.selected_week(_tg(msg))
    sub = get_submission_for_week(week.id)
    if sub is None or not sub.audio_base64:
        return await msg.answer("No voice note for this week.")
    try:
        mime, data = from_data_uri(sub.audio_base64)
    except ValidationError:
        logger.warning("stored audio for week=%s is not a valid data URI", week.id)
        return await msg.answer("Stored voice note is unreadable.")
    file = BufferedInputFile(data, filename=filename_for(mime, sha256_bytes(data)))
    if mime.startswith("audio/ogg"):
        await msg.answer_voice(file)
    else:
        await msg.answer_audio(file)


@router.message(Command("passwords"))
async def admin_passwords(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    parts = _arg(msg).split()
    if len(parts) != 2:
        return await msg.answer("usage: /passwords <admin_password> <student_password>")
    try:
        admin_pass = settings_store.validate_password(parts[0])
        student_pass = settings_store.validate_password(parts[1])
    except ValidationError:
        return await msg.answer(
            f"Passwords must be at least {settings_store.MIN_PASSWORD_LEN} characters."
        )
    settings_store.update(admin_pass=admin_pass, student_pass=student_pass)
    await msg.answer("Passwords updated.")


@router.message(Command("reset"))
async def admin_reset(msg: Message, role: Optional[str] = None):
    if role != ADMIN:
        return await msg.answer(FORBIDDEN)
    if _arg(msg) != "confirm":
        return await msg.answer(
            "This deletes all weeks, tasks, submissions and passwords. "
            "Send /reset confirm to proceed."
        )
    clear_all()
    sessions.clear_drafts()
    logger.warning("admin reset by tg_id=%s", _tg(msg))
    await msg.answer("All data cleared. Passwords are back to defaults.")

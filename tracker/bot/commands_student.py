from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional

from aiogram import F, Router, types
from aiogram.filters import Command

from tracker.core import callbacks, config, sessions
from tracker.core.audio import to_data_uri
from tracker.core.errors import StateError, ValidationError
from tracker.core.models import Task, Week
from tracker.core.reports import progress_percent
from tracker.core.roles import ADMIN, STUDENT
from tracker.core.submissions_repo import (
    DEFAULT_STUDENT_NAME,
    build_submission,
    upsert_submission,
)
from tracker.core.tasks_repo import list_tasks_for_week
from tracker.core.weeks_repo import get_week, list_weeks

logger = logging.getLogger(__name__)

router = Router(name="student")

LOGIN_FIRST = "Please log in first: /login student <password>"
ADMIN_VOICE = "Voice notes come from the student account. Use /listen to hear one."
OP_TOGGLE = "stg"
OP_SUBMIT = "ssub"
EXPIRED_BUTTON = "This button has expired, open /tasks again."


def _tg(obj: types.Message | types.CallbackQuery) -> str:
    return str(obj.from_user.id)


def checklist_text(week: Week, tasks: List[Task], draft: Dict[str, Any]) -> str:
    done = draft["completed"]
    lines = [f"<b>{html.escape(week.title)}</b>"]
    if not tasks:
        lines.append("No tasks for this week yet.")
    else:
        lines.append(f"Progress: {progress_percent(len(done), len(tasks))}%")
    lines.append(f"Voice note: {'attached' if draft['audio'] else 'none'}")
    if draft.get("submitted"):
        lines.append("Status: submitted ✅")
    else:
        lines.append("Status: not submitted, press Submit when ready")
    return "\n".join(lines)


def checklist_markup(
    week: Week, tasks: List[Task], draft: Dict[str, Any]
) -> types.InlineKeyboardMarkup:
    done = set(draft["completed"])
    rows: list[list[types.InlineKeyboardButton]] = []
    for t in tasks:
        mark = "✅" if t.id in done else "⬜"
        rows.append(
            [
                callbacks.button(
                    f"{mark} {t.text}",
                    OP_TOGGLE,
                    {"week": week.id, "task": t.id},
                    role=STUDENT,
                )
            ]
        )
    rows.append(
        [callbacks.button("📤 Submit", OP_SUBMIT, {"week": week.id}, role=STUDENT)]
    )
    return types.InlineKeyboardMarkup(inline_keyboard=rows)


async def _show_checklist(
    msg: types.Message, tg_id: str, week: Week, edit: bool = False
):
    tasks = list_tasks_for_week(week.id)
    draft = sessions.load_draft(tg_id, week.id)
    text = checklist_text(week, tasks, draft)
    markup = checklist_markup(week, tasks, draft)
    if edit:
        await msg.edit_text(text, reply_markup=markup, parse_mode="HTML")
    else:
        await msg.answer(text, reply_markup=markup, parse_mode="HTML")


def _submit(tg_id: str, week_id: str, student_name: Optional[str]) -> None:
    draft = sessions.load_draft(tg_id, week_id)
    submission = build_submission(
        week_id,
        draft["completed"],
        draft["audio"],
        student_name=student_name or DEFAULT_STUDENT_NAME,
    )
    upsert_submission(submission)
    sessions.save_draft(
        tg_id, week_id, draft["completed"], draft["audio"], submitted=True
    )


@router.message(Command("weeks"))
async def student_weeks(msg: types.Message, role: Optional[str] = None):
    if role != STUDENT:
        return await msg.answer(LOGIN_FIRST)
    current = sessions.selected_week(_tg(msg))
    lines = ["<b>Weeks</b> (newest first):"]
    for i, w in enumerate(list_weeks(), start=1):
        mark = "▶️" if w.id == current.id else "•"
        lines.append(f"{mark} {i}. {html.escape(w.title)}")
    lines.append("Open a week with /week &lt;n&gt;")
    await msg.answer("\n".join(lines), parse_mode="HTML")


@router.message(Command("week"))
async def student_select_week(msg: types.Message, role: Optional[str] = None):
    if role != STUDENT:
        return await msg.answer(LOGIN_FIRST)
    parts = (msg.text or "").split(maxsplit=1)
    raw = parts[1].strip() if len(parts) > 1 else ""
    week = sessions.week_by_position(int(raw)) if raw.isdigit() else None
    if week is None:
        return await msg.answer("usage: /week <n> (see /weeks)")
    sessions.select_week(_tg(msg), week.id)
    await _show_checklist(msg, _tg(msg), week)


@router.message(Command("tasks"))
async def student_tasks(msg: types.Message, role: Optional[str] = None):
    if role != STUDENT:
        return await msg.answer(LOGIN_FIRST)
    await _show_checklist(msg, _tg(msg), sessions.selected_week(_tg(msg)))


@router.callback_query(F.data.startswith(OP_TOGGLE + callbacks.SEPARATOR))
async def student_toggle(cq: types.CallbackQuery, role: Optional[str] = None):
    if role != STUDENT:
        return await cq.answer(LOGIN_FIRST, show_alert=True)
    try:
        _, params = callbacks.extract(cq.data, expected_role=STUDENT)
    except StateError:
        return await cq.answer(EXPIRED_BUTTON, show_alert=True)
    week = get_week(params["week"])
    if week is None:
        return await cq.answer("Week not found.", show_alert=True)
    sessions.toggle_task(_tg(cq), week.id, params["task"])
    await cq.answer()
    await _show_checklist(cq.message, _tg(cq), week, edit=True)


@router.callback_query(F.data.startswith(OP_SUBMIT + callbacks.SEPARATOR))
async def student_submit_cb(cq: types.CallbackQuery, role: Optional[str] = None):
    if role != STUDENT:
        return await cq.answer(LOGIN_FIRST, show_alert=True)
    try:
        _, params = callbacks.extract(cq.data, expected_role=STUDENT)
    except StateError:
        return await cq.answer(EXPIRED_BUTTON, show_alert=True)
    week = get_week(params["week"])
    if week is None:
        return await cq.answer("Week not found.", show_alert=True)
    _submit(_tg(cq), week.id, cq.from_user.full_name)
    await cq.answer("Submitted! 🎉")
    await _show_checklist(cq.message, _tg(cq), week, edit=True)


@router.message(Command("submit"))
async def student_submit(msg: types.Message, role: Optional[str] = None):
    if role != STUDENT:
        return await msg.answer(LOGIN_FIRST)
    week = sessions.selected_week(_tg(msg))
    _submit(_tg(msg), week.id, msg.from_user.full_name)
    await msg.answer(f"Submitted {html.escape(week.title)}! 🎉", parse_mode="HTML")


@router.message(F.voice | F.audio)
async def student_voice(msg: types.Message, role: Optional[str] = None):
    if role == ADMIN:
        return await msg.answer(ADMIN_VOICE)
    if role != STUDENT:
        return await msg.answer(LOGIN_FIRST)
    media = msg.voice or msg.audio
    file = await msg.bot.get_file(media.file_id)
    buf = await msg.bot.download_file(file.file_path)
    try:
        uri = to_data_uri(
            buf.read(),
            mime=media.mime_type or "audio/ogg",
            max_bytes=config.cfg.max_audio_bytes,
        )
    except ValidationError as e:
        logger.warning("voice rejected tg_id=%s: %s", _tg(msg), e)
        return await msg.answer(
            f"Recording rejected (max {config.cfg.max_audio_mb} MB). Try a shorter one."
        )
    week = sessions.selected_week(_tg(msg))
    draft = sessions.load_draft(_tg(msg), week.id)
    sessions.save_draft(_tg(msg), week.id, draft["completed"], uri)
    await msg.answer(
        f"Voice note attached to {html.escape(week.title)}. Press /submit to send it.",
        parse_mode="HTML",
    )

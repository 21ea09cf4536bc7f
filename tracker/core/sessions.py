"""Password gate and per-chat selections on top of the state store."""

import logging
from typing import Any, Dict, List, Optional

from tracker.core import config, settings_store, state_store
from tracker.core.models import Week
from tracker.core.roles import ALL_ROLES
from tracker.core.submissions_repo import get_submission_for_week
from tracker.core.weeks_repo import list_weeks

logger = logging.getLogger(__name__)


def _session_key(tg_id: str) -> str:
    return f"session:{tg_id}"


def _week_key(tg_id: str) -> str:
    return f"week:{tg_id}"


def _draft_key(tg_id: str, week_id: str) -> str:
    return f"draft:{tg_id}:{week_id}"


def login(tg_id: str, role: str, password: str) -> bool:
    if role not in ALL_ROLES or not settings_store.verify(role, password):
        logger.warning("login failed tg_id=%s role=%s", tg_id, role)
        return False
    state_store.put_at(
        _session_key(tg_id),
        "session",
        {"role": role},
        role=role,
        ttl_sec=config.cfg.session_ttl_sec,
    )
    logger.info("login ok tg_id=%s role=%s", tg_id, role)
    return True


def current_role(tg_id: str) -> Optional[str]:
    params = state_store.peek(_session_key(tg_id))
    return params.get("role") if params else None


def logout(tg_id: str) -> None:
    state_store.delete(_session_key(tg_id))
    state_store.delete(_week_key(tg_id))


def clear_drafts() -> int:
    """Forget every draft and week selection; sessions stay logged in."""
    removed = state_store.delete_prefix("draft:") + state_store.delete_prefix("week:")
    logger.info("sessions: cleared %d drafts and selections", removed)
    return removed


# ---------- WEEK SELECTION ----------


def select_week(tg_id: str, week_id: str) -> None:
    state_store.put_at(
        _week_key(tg_id), "week", {"id": week_id}, ttl_sec=config.cfg.session_ttl_sec
    )


def selected_week(tg_id: str) -> Week:
    """Selected week, falling back to the newest one."""
    weeks = list_weeks()
    params = state_store.peek(_week_key(tg_id))
    if params:
        for w in weeks:
            if w.id == params.get("id"):
                return w
    return weeks[0]


def week_by_position(pos: int) -> Optional[Week]:
    """1-based position in the newest-first week list."""
    weeks = list_weeks()
    if 1 <= pos <= len(weeks):
        return weeks[pos - 1]
    return None


# ---------- STUDENT DRAFTS ----------


def load_draft(tg_id: str, week_id: str) -> Dict[str, Any]:
    """Unsaved checklist and voice note, seeded from the stored submission."""
    draft = state_store.peek(_draft_key(tg_id, week_id))
    if draft is not None:
        return draft
    sub = get_submission_for_week(week_id)
    if sub is None:
        return {"completed": [], "audio": None, "submitted": False}
    return {
        "completed": list(sub.completed_task_ids),
        "audio": sub.audio_base64,
        "submitted": True,
    }


def save_draft(
    tg_id: str,
    week_id: str,
    completed: List[str],
    audio: Optional[str],
    submitted: bool = False,
) -> None:
    state_store.put_at(
        _draft_key(tg_id, week_id),
        "draft",
        {"completed": completed, "audio": audio, "submitted": submitted},
        ttl_sec=config.cfg.session_ttl_sec,
    )


def toggle_task(tg_id: str, week_id: str, task_id: str) -> Dict[str, Any]:
    draft = load_draft(tg_id, week_id)
    completed = list(draft["completed"])
    if task_id in completed:
        completed.remove(task_id)
    else:
        completed.append(task_id)
    save_draft(tg_id, week_id, completed, draft["audio"])
    return {"completed": completed, "audio": draft["audio"], "submitted": False}

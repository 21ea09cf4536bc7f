"""Tasks of all weeks, kept in one flat collection keyed by ``weekId``.

Writes are always scoped to one week: records of other weeks are carried over
verbatim, so a caller holding only one week's tasks can never drop the rest.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from tracker.core.kv_store import (
    TASKS_KEY,
    Storage,
    collection_lock,
    default_storage,
    read_json,
    write_json,
)
from tracker.core.models import Task, gen_id, now_ms

logger = logging.getLogger(__name__)


def _load_raw(storage: Storage) -> List[Dict[str, Any]]:
    raw = read_json(storage, TASKS_KEY, [])
    if not isinstance(raw, list):
        return []
    return [d for d in raw if isinstance(d, dict)]


def _parse(records: List[Dict[str, Any]]) -> List[Task]:
    tasks = []
    for d in records:
        try:
            tasks.append(Task.from_dict(d))
        except (KeyError, TypeError, ValueError):
            logger.warning("tasks: skipping malformed record %r", d)
    return tasks


def list_all_tasks(storage: Optional[Storage] = None) -> List[Task]:
    storage = storage or default_storage()
    return _parse(_load_raw(storage))


def list_tasks_for_week(week_id: str, storage: Optional[Storage] = None) -> List[Task]:
    return [t for t in list_all_tasks(storage) if t.week_id == week_id]


def _replace_locked(storage: Storage, week_id: str, new_week_tasks: List[Task]) -> None:
    other_weeks = [d for d in _load_raw(storage) if d.get("weekId") != week_id]
    write_json(
        storage, TASKS_KEY, other_weeks + [t.to_dict() for t in new_week_tasks]
    )
    logger.info(
        "tasks: week=%s replaced with %d tasks (%d kept from other weeks)",
        week_id,
        len(new_week_tasks),
        len(other_weeks),
    )


def replace_week_tasks(
    week_id: str, new_week_tasks: Iterable[Task], storage: Optional[Storage] = None
) -> None:
    """Drop every task of ``week_id`` and append ``new_week_tasks``.

    All ``new_week_tasks`` must carry ``week_id``; this is not checked.
    """
    storage = storage or default_storage()
    with collection_lock(TASKS_KEY):
        _replace_locked(storage, week_id, list(new_week_tasks))


def new_task(week_id: str, text: str) -> Task:
    return Task(
        id=gen_id(), text=text, week_id=week_id, completed=False, created_at=now_ms()
    )


def add_tasks(
    week_id: str, texts: Iterable[str], storage: Optional[Storage] = None
) -> List[Task]:
    """Append one task per text to the week (manual add or AI batch)."""
    storage = storage or default_storage()
    created = [new_task(week_id, text) for text in texts]
    with collection_lock(TASKS_KEY):
        current = _parse([d for d in _load_raw(storage) if d.get("weekId") == week_id])
        _replace_locked(storage, week_id, current + created)
    return created


def add_task(week_id: str, text: str, storage: Optional[Storage] = None) -> Task:
    return add_tasks(week_id, [text], storage)[0]


def delete_task(week_id: str, task_id: str, storage: Optional[Storage] = None) -> bool:
    storage = storage or default_storage()
    with collection_lock(TASKS_KEY):
        current = _parse([d for d in _load_raw(storage) if d.get("weekId") == week_id])
        remaining = [t for t in current if t.id != task_id]
        if len(remaining) == len(current):
            return False
        _replace_locked(storage, week_id, remaining)
    return True

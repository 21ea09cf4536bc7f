import logging
from typing import List, Optional

from tracker.core.errors import ValidationError
from tracker.core.kv_store import (
    WEEKS_KEY,
    Storage,
    collection_lock,
    default_storage,
    read_records,
    write_json,
)
from tracker.core.models import Week, gen_id, now_ms
from tracker.services.common.time_service import local_today

logger = logging.getLogger(__name__)

DEFAULT_WEEK_TITLE = "Week 1"


def _load(storage: Storage) -> List[Week]:
    return read_records(storage, WEEKS_KEY, Week.from_dict)


def _save(storage: Storage, weeks: List[Week]) -> None:
    write_json(storage, WEEKS_KEY, [w.to_dict() for w in weeks])


def _load_or_seed(storage: Storage) -> List[Week]:
    weeks = _load(storage)
    if not weeks:
        # Default week id is today's date
        default = Week(
            id=local_today().isoformat(), title=DEFAULT_WEEK_TITLE, created_at=now_ms()
        )
        weeks = [default]
        _save(storage, weeks)
        logger.info("weeks: default week %s created", default.id)
    # sorted() is stable, so equal timestamps keep persisted order
    return sorted(weeks, key=lambda w: w.created_at, reverse=True)


def list_weeks(storage: Optional[Storage] = None) -> List[Week]:
    """All weeks, newest first. Seeds one default week on an empty store."""
    storage = storage or default_storage()
    with collection_lock(WEEKS_KEY):
        return _load_or_seed(storage)


def create_week(title: str, storage: Optional[Storage] = None) -> Week:
    """Prepend a new week. Callers must pass a non-blank title."""
    storage = storage or default_storage()
    with collection_lock(WEEKS_KEY):
        weeks = _load_or_seed(storage)
        week = Week(id=gen_id(), title=title, created_at=now_ms())
        weeks.insert(0, week)
        _save(storage, weeks)
    logger.info("weeks: created id=%s title=%r", week.id, week.title)
    return week


def get_week(week_id: str, storage: Optional[Storage] = None) -> Optional[Week]:
    for w in list_weeks(storage):
        if w.id == week_id:
            return w
    return None


def validate_week_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("week title must not be empty")
    return cleaned

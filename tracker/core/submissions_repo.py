import logging
from typing import Iterable, List, Optional

from tracker.core.kv_store import (
    SUBMISSIONS_KEY,
    Storage,
    collection_lock,
    default_storage,
    read_records,
    write_json,
)
from tracker.core.models import WeeklySubmission, gen_id, now_ms

logger = logging.getLogger(__name__)

DEFAULT_STUDENT_NAME = "Student"


def _load(storage: Storage) -> List[WeeklySubmission]:
    return read_records(storage, SUBMISSIONS_KEY, WeeklySubmission.from_dict)


def list_submissions(storage: Optional[Storage] = None) -> List[WeeklySubmission]:
    return _load(storage or default_storage())


def get_submission_for_week(
    week_id: str, storage: Optional[Storage] = None
) -> Optional[WeeklySubmission]:
    for s in list_submissions(storage):
        if s.week_id == week_id:
            return s
    return None


def upsert_submission(
    submission: WeeklySubmission, storage: Optional[Storage] = None
) -> None:
    """Replace the week's submission in place, or append if the week has none."""
    storage = storage or default_storage()
    with collection_lock(SUBMISSIONS_KEY):
        submissions = _load(storage)
        for i, s in enumerate(submissions):
            if s.week_id == submission.week_id:
                submissions[i] = submission
                action = "replaced"
                break
        else:
            submissions.append(submission)
            action = "added"
        write_json(storage, SUBMISSIONS_KEY, [s.to_dict() for s in submissions])
    logger.info(
        "submissions: %s week=%s completed=%d audio=%s",
        action,
        submission.week_id,
        len(submission.completed_task_ids),
        submission.audio_base64 is not None,
    )


def build_submission(
    week_id: str,
    completed_task_ids: Iterable[str],
    audio_base64: Optional[str] = None,
    student_name: str = DEFAULT_STUDENT_NAME,
) -> WeeklySubmission:
    return WeeklySubmission(
        id=gen_id(),
        week_id=week_id,
        student_name=student_name,
        completed_task_ids=list(completed_task_ids),
        audio_base64=audio_base64,
        timestamp=now_ms(),
    )

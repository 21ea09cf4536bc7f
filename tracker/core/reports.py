from __future__ import annotations

import html

from dataclasses import dataclass
from typing import List, Optional

from tracker.core.kv_store import Storage
from tracker.core.models import Task, WeeklySubmission
from tracker.core.submissions_repo import get_submission_for_week
from tracker.core.tasks_repo import list_tasks_for_week
from tracker.services.common.time_service import format_datetime


@dataclass
class WeekReport:
    week_id: str
    tasks: List[Task]
    submission: Optional[WeeklySubmission]
    completed: List[Task]
    pending: List[Task]
    progress: int


def progress_percent(completed_count: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(completed_count / total * 100)


def week_report(week_id: str, storage: Optional[Storage] = None) -> WeekReport:
    tasks = list_tasks_for_week(week_id, storage)
    submission = get_submission_for_week(week_id, storage)
    done_ids = set(submission.completed_task_ids) if submission else set()
    # Stale ids of deleted tasks still count toward progress
    done_count = len(submission.completed_task_ids) if submission else 0
    return WeekReport(
        week_id=week_id,
        tasks=tasks,
        submission=submission,
        completed=[t for t in tasks if t.id in done_ids],
        pending=[t for t in tasks if t.id not in done_ids],
        progress=progress_percent(done_count, len(tasks)),
    )


def format_report(report: WeekReport, week_title: str) -> str:
    lines: List[str] = [f"<b>Report: {html.escape(week_title)}</b>"]
    sub = report.submission
    if sub is None:
        lines.append("Status: not submitted yet")
    else:
        lines.append(
            f"Status: submitted by {html.escape(sub.student_name)} "
            f"at {format_datetime(sub.timestamp // 1000)}"
        )
        lines.append(f"Voice note: {'yes (/listen)' if sub.audio_base64 else 'no'}")
        if sub.feedback:
            lines.append(f"Feedback: {html.escape(sub.feedback)}")
    lines.append(f"Progress: {report.progress}%")
    lines.append("")
    lines.append(f"<b>Done ({len(report.completed)}):</b>")
    lines.extend(f"✅ {html.escape(t.text)}" for t in report.completed)
    lines.append(f"<b>Pending ({len(report.pending)}):</b>")
    lines.extend(f"⏳ {html.escape(t.text)}" for t in report.pending)
    return "\n".join(lines)

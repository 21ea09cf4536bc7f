from tracker.core import reports
from tracker.core.submissions_repo import build_submission, upsert_submission
from tracker.core.tasks_repo import add_tasks


def test_report_without_submission(mem):
    add_tasks("w1", ["One", "Two"], mem)
    r = reports.week_report("w1", mem)
    assert r.submission is None
    assert r.progress == 0
    assert [t.text for t in r.pending] == ["One", "Two"]
    text = reports.format_report(r, "Week <1>")
    assert "Week &lt;1&gt;" in text and "not submitted" in text


def test_report_splits_done_and_pending(mem):
    one, two, three = add_tasks("w1", ["One", "Two", "Three"], mem)
    upsert_submission(build_submission("w1", [one.id, three.id]), mem)
    r = reports.week_report("w1", mem)
    assert [t.id for t in r.completed] == [one.id, three.id]
    assert [t.id for t in r.pending] == [two.id]
    assert r.progress == 67
    text = reports.format_report(r, "Week 1")
    assert "Progress: 67%" in text and "Voice note: no" in text


def test_stale_ids_count_toward_progress(mem):
    (one,) = add_tasks("w1", ["One"], mem)
    upsert_submission(build_submission("w1", [one.id, "gone"]), mem)
    assert reports.week_report("w1", mem).progress == 200


def test_progress_percent_empty():
    assert reports.progress_percent(3, 0) == 0
    assert reports.progress_percent(1, 2) == 50

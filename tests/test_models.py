import json

from tracker.core.models import AppSettings, Task, Week, WeeklySubmission


def _through_json(obj):
    return type(obj).from_dict(json.loads(json.dumps(obj.to_dict())))


def test_week_and_task_roundtrip():
    w = Week(id="2025-03-01", title="Week 1", created_at=1_700_000_000_123)
    t = Task(id="t1", text="Read page 10", week_id=w.id, completed=True, created_at=5)
    assert _through_json(w) == w
    assert _through_json(t) == t
    assert t.to_dict() == {
        "id": "t1",
        "text": "Read page 10",
        "completed": True,
        "weekId": "2025-03-01",
        "createdAt": 5,
    }


def test_submission_roundtrip_with_and_without_feedback():
    s = WeeklySubmission(
        id="s1",
        week_id="w1",
        student_name="Sam",
        completed_task_ids=["t2", "t1"],
        audio_base64=None,
        timestamp=42,
    )
    assert "feedback" not in s.to_dict()
    assert _through_json(s) == s

    s.feedback = "Great job"
    s.audio_base64 = "data:audio/ogg;base64,AAAA"
    back = _through_json(s)
    assert back == s
    assert back.completed_task_ids == ["t2", "t1"]


def test_settings_roundtrip_uses_wire_names():
    st = AppSettings(admin_pass="abc", student_pass="xyz")
    assert st.to_dict() == {"adminPass": "abc", "studentPass": "xyz"}
    assert _through_json(st) == st

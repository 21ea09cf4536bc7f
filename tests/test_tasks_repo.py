import json

from tracker.core import tasks_repo
from tracker.core.kv_store import TASKS_KEY
from tracker.core.models import Task


def _seed(mem, tasks):
    mem.set(TASKS_KEY, json.dumps([t.to_dict() for t in tasks]))


def _raw(mem):
    return json.loads(mem.get(TASKS_KEY))


def test_replace_leaves_other_weeks_untouched(mem):
    _seed(
        mem,
        [
            Task(id="a1", text="A1", week_id="wa", created_at=1),
            Task(id="b1", text="B1", week_id="wb", created_at=2),
            Task(id="a2", text="A2", week_id="wa", created_at=3),
            Task(id="b2", text="B2", week_id="wb", created_at=4),
        ],
    )
    before_b = tasks_repo.list_tasks_for_week("wb", mem)

    tasks_repo.replace_week_tasks(
        "wa", [Task(id="a9", text="A9", week_id="wa", created_at=9)], mem
    )

    assert tasks_repo.list_tasks_for_week("wb", mem) == before_b
    assert [t.id for t in tasks_repo.list_tasks_for_week("wa", mem)] == ["a9"]


def test_replace_with_empty_clears_only_that_week(mem):
    _seed(
        mem,
        [
            Task(id="a1", text="A1", week_id="wa", created_at=1),
            Task(id="b1", text="B1", week_id="wb", created_at=2),
        ],
    )
    tasks_repo.replace_week_tasks("wa", [], mem)
    assert tasks_repo.list_tasks_for_week("wa", mem) == []
    assert [t.id for t in tasks_repo.list_all_tasks(mem)] == ["b1"]


def test_end_to_end_scoped_write_keeps_foreign_record_verbatim(mem):
    # foreign record carries a key this version does not model
    t2_raw = {
        "id": "t2",
        "text": "Week two task",
        "completed": False,
        "weekId": "w2",
        "createdAt": 200,
        "note": "kept",
    }
    mem.set(
        TASKS_KEY,
        json.dumps(
            [
                {
                    "id": "t1",
                    "text": "Week one task",
                    "completed": False,
                    "weekId": "w1",
                    "createdAt": 100,
                },
                t2_raw,
            ]
        ),
    )

    tasks_repo.replace_week_tasks(
        "w1",
        [
            Task(
                id="t1",
                text="Week one task",
                week_id="w1",
                completed=True,
                created_at=100,
            ),
            Task(id="t3", text="New", week_id="w1", created_at=300),
        ],
        mem,
    )

    raw = _raw(mem)
    assert len(raw) == 3
    by_id = {d["id"]: d for d in raw}
    assert by_id["t2"] == t2_raw
    assert by_id["t1"]["completed"] is True and by_id["t1"]["weekId"] == "w1"
    assert by_id["t3"]["weekId"] == "w1"


def test_add_and_delete_compose_on_scoped_write(mem):
    other = tasks_repo.add_task("w2", "Other week", mem)
    created = tasks_repo.add_tasks("w1", ["Memorize 5 colors", "Read the story"], mem)
    assert [t.text for t in tasks_repo.list_tasks_for_week("w1", mem)] == [
        "Memorize 5 colors",
        "Read the story",
    ]
    assert all(not t.completed and t.week_id == "w1" for t in created)
    assert len({t.id for t in created}) == 2

    assert tasks_repo.delete_task("w1", created[0].id, mem) is True
    assert tasks_repo.delete_task("w1", "missing", mem) is False
    # a task id from another week is not reachable through w1
    assert tasks_repo.delete_task("w1", other.id, mem) is False
    assert [t.id for t in tasks_repo.list_tasks_for_week("w1", mem)] == [created[1].id]
    assert tasks_repo.list_tasks_for_week("w2", mem) == [other]


def test_corrupt_collection_reads_empty(mem):
    mem.set(TASKS_KEY, "not-json")
    assert tasks_repo.list_all_tasks(mem) == []
    tasks_repo.add_task("w1", "Fresh start", mem)
    assert len(tasks_repo.list_all_tasks(mem)) == 1


def test_task_without_created_at_is_skipped(mem):
    good = Task(id="t1", text="Read", week_id="w1", created_at=1)
    mem.set(
        TASKS_KEY,
        json.dumps([{"id": "t0", "text": "Old", "weekId": "w1"}, good.to_dict()]),
    )
    assert tasks_repo.list_all_tasks(mem) == [good]
    assert tasks_repo.list_tasks_for_week("w1", mem) == [good]

    added = tasks_repo.add_task("w1", "Write", mem)
    assert [t.id for t in tasks_repo.list_tasks_for_week("w1", mem)] == ["t1", added.id]
    assert tasks_repo.delete_task("w1", "t1", mem)
    assert [t.id for t in tasks_repo.list_all_tasks(mem)] == [added.id]

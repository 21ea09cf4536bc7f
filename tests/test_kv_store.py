import pytest

from tracker.core import kv_store
from tracker.core.kv_store import (
    ALL_KEYS,
    TASKS_KEY,
    MemoryStorage,
    SqliteStorage,
    clear_all,
    read_json,
    write_json,
)


def test_read_json_absent_and_corrupt(mem):
    assert read_json(mem, TASKS_KEY, []) == []
    mem.set(TASKS_KEY, "{not json")
    assert read_json(mem, TASKS_KEY, []) == []


def test_write_json_is_compact_utf8(mem):
    write_json(mem, "k", {"title": "الأسبوع الأول", "n": [1, 2]})
    assert mem.get("k") == '{"title":"الأسبوع الأول","n":[1,2]}'


def test_clear_all_removes_every_collection():
    storage = MemoryStorage({k: "[]" for k in ALL_KEYS})
    storage.set("unrelated", "1")
    clear_all(storage)
    assert all(storage.get(k) is None for k in ALL_KEYS)
    assert storage.get("unrelated") == "1"


@pytest.mark.usefixtures("db_tmpdir")
def test_sqlite_storage_set_get_remove():
    s = SqliteStorage()
    assert s.get("app_weeks") is None
    s.set("app_weeks", "[]")
    s.set("app_weeks", '[{"id":"w"}]')
    assert s.get("app_weeks") == '[{"id":"w"}]'
    s.remove("app_weeks")
    assert s.get("app_weeks") is None


def test_collection_lock_is_per_key():
    assert kv_store.collection_lock(TASKS_KEY) is kv_store.collection_lock(TASKS_KEY)
    assert kv_store.collection_lock(TASKS_KEY) is not kv_store.collection_lock(
        kv_store.WEEKS_KEY
    )

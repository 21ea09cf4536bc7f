import json

import pytest

from tracker.core import settings_store
from tracker.core.errors import ValidationError
from tracker.core.kv_store import SETTINGS_KEY
from tracker.core.roles import ADMIN, STUDENT


def test_get_returns_defaults_without_persisting(mem):
    st = settings_store.get(mem)
    assert (st.admin_pass, st.student_pass) == ("1234", "1234")
    assert mem.get(SETTINGS_KEY) is None


def test_initialize_is_idempotent(mem):
    settings_store.initialize(mem)
    assert json.loads(mem.get(SETTINGS_KEY)) == {
        "adminPass": "1234",
        "studentPass": "1234",
    }
    settings_store.update(mem, admin_pass="secret")
    settings_store.initialize(mem)
    assert settings_store.get(mem).admin_pass == "secret"


def test_update_merges_partial(mem):
    merged = settings_store.update(mem, student_pass="kid")
    assert merged.admin_pass == "1234" and merged.student_pass == "kid"
    assert settings_store.get(mem) == merged


def test_verify_follows_updates_immediately(mem):
    settings_store.initialize(mem)
    assert settings_store.verify(ADMIN, "1234", mem)
    assert not settings_store.verify(ADMIN, "12345", mem)
    settings_store.update(mem, admin_pass="new-pass")
    assert not settings_store.verify(ADMIN, "1234", mem)
    assert settings_store.verify(ADMIN, "new-pass", mem)
    assert settings_store.verify(STUDENT, "1234", mem)


def test_verify_unknown_role_is_false(mem):
    assert not settings_store.verify("OWNER", "1234", mem)
    assert not settings_store.verify("admin", "1234", mem)


def test_corrupt_settings_read_as_defaults(mem):
    mem.set(SETTINGS_KEY, "][")
    assert settings_store.verify(ADMIN, "1234", mem)


def test_validate_password_min_length():
    assert settings_store.validate_password("abc") == "abc"
    with pytest.raises(ValidationError):
        settings_store.validate_password("ab")

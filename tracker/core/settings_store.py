"""Role passwords for the admin/student gate.

Passwords are compared in plaintext, with no hashing and no rate limiting.
"""

import logging
from dataclasses import replace
from typing import Optional

from tracker.core.errors import ValidationError
from tracker.core.kv_store import (
    SETTINGS_KEY,
    Storage,
    collection_lock,
    default_storage,
    read_json,
    write_json,
)
from tracker.core.models import AppSettings
from tracker.core.roles import ADMIN, STUDENT

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = AppSettings(admin_pass="1234", student_pass="1234")
MIN_PASSWORD_LEN = 3


def initialize(storage: Optional[Storage] = None) -> None:
    storage = storage or default_storage()
    with collection_lock(SETTINGS_KEY):
        if storage.get(SETTINGS_KEY) is None:
            write_json(storage, SETTINGS_KEY, DEFAULT_SETTINGS.to_dict())
            logger.info("settings: defaults written")


def get(storage: Optional[Storage] = None) -> AppSettings:
    storage = storage or default_storage()
    stored = read_json(storage, SETTINGS_KEY, None)
    if not isinstance(stored, dict):
        return replace(DEFAULT_SETTINGS)
    return AppSettings.from_dict({**DEFAULT_SETTINGS.to_dict(), **stored})


def update(
    storage: Optional[Storage] = None,
    *,
    admin_pass: Optional[str] = None,
    student_pass: Optional[str] = None,
) -> AppSettings:
    """Merge the given fields over the current settings and persist."""
    storage = storage or default_storage()
    with collection_lock(SETTINGS_KEY):
        current = get(storage)
        if admin_pass is not None:
            current.admin_pass = admin_pass
        if student_pass is not None:
            current.student_pass = student_pass
        write_json(storage, SETTINGS_KEY, current.to_dict())
    logger.info(
        "settings: updated fields=%s",
        [
            n
            for n, v in (("adminPass", admin_pass), ("studentPass", student_pass))
            if v is not None
        ],
    )
    return current


def verify(role: str, candidate: str, storage: Optional[Storage] = None) -> bool:
    settings = get(storage)
    if role == ADMIN:
        return candidate == settings.admin_pass
    if role == STUDENT:
        return candidate == settings.student_pass
    return False


def validate_password(value: str) -> str:
    if len(value or "") < MIN_PASSWORD_LEN:
        raise ValidationError(
            f"password must be at least {MIN_PASSWORD_LEN} characters"
        )
    return value

"""Inline-button payloads.

Telegram caps callback data at 64 bytes, so a button only carries
``"<op>:<key>"`` and the params sit in the state store until pressed.
"""

from typing import Any, Optional, Tuple

from aiogram.types import InlineKeyboardButton

from tracker.core import state_store
from tracker.core.errors import StateError

SEPARATOR = ":"
BUTTON_TTL_SEC = 24 * 3600


def build(op: str, params: Any, role: Optional[str] = None) -> str:
    assert SEPARATOR not in op, "op must not contain ':'"
    key = state_store.put(action=op, params=params, role=role, ttl_sec=BUTTON_TTL_SEC)
    return f"{op}{SEPARATOR}{key}"


def button(
    text: str, op: str, params: Any, role: Optional[str] = None
) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, callback_data=build(op, params, role))


def op_of(data: Optional[str]) -> str:
    return (data or "").split(SEPARATOR, 1)[0]


def extract(data: str, expected_role: Optional[str] = None) -> Tuple[str, Any]:
    """Resolve callback data to (op, params); the entry is single-use."""
    op, _, key = (data or "").partition(SEPARATOR)
    if not key:
        raise StateError("no state key in callback data")
    action, params = state_store.get(key, expected_role=expected_role)
    if action != op:
        raise StateError("action mismatch")
    state_store.delete(key)
    return action, params

"""Short-lived chat state: login sessions, selected weeks, drafts, button payloads."""

import json
import time
import uuid
from typing import Any, Optional, Tuple

from tracker.core.errors import StateExpired, StateNotFound, StateRoleMismatch
from tracker.db.conn import db

DEFAULT_TTL_SEC = 15 * 60  # 15 minutes


def now() -> int:
    return int(time.time())


def _ensure_table():
    # Table is created by migrations; keep as guard in dev
    with db() as conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS state_store ("
            "key TEXT PRIMARY KEY, role TEXT, action TEXT, params TEXT, "
            "created_at_utc INTEGER NOT NULL, expires_at_utc INTEGER NOT NULL)"
        )


def gen_key() -> str:
    return uuid.uuid4().hex[:12]


def put_at(
    key: str,
    action: str,
    params: Any,
    role: Optional[str] = None,
    ttl_sec: int = DEFAULT_TTL_SEC,
) -> None:
    """Store action/params under ``key``, overwriting any previous entry."""
    _ensure_table()
    created = now()
    payload = json.dumps(params, ensure_ascii=False, separators=(",", ":"))
    with db() as conn:
        conn.execute(
            """
            INSERT INTO state_store(key, role, action, params, created_at_utc, expires_at_utc)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
              role=excluded.role,
              action=excluded.action,
              params=excluded.params,
              created_at_utc=excluded.created_at_utc,
              expires_at_utc=excluded.expires_at_utc
            """,
            (key, role, action, payload, created, created + max(1, ttl_sec)),
        )
        conn.commit()


def put(
    action: str,
    params: Any,
    role: Optional[str] = None,
    ttl_sec: int = DEFAULT_TTL_SEC,
) -> str:
    """Store under a generated key and return the key."""
    key = gen_key()
    put_at(key, action, params, role=role, ttl_sec=ttl_sec)
    return key


def get(key: str, expected_role: Optional[str] = None) -> Tuple[str, Any]:
    _ensure_table()
    with db() as conn:
        row = conn.execute(
            "SELECT role, action, params, expires_at_utc FROM state_store WHERE key = ?",
            (key,),
        ).fetchone()
    if row is None:
        raise StateNotFound("state key not found")
    if row["expires_at_utc"] < now():
        delete(key)
        raise StateExpired("state key expired")
    role = row["role"]
    if expected_role and role and expected_role != role:
        raise StateRoleMismatch(f"expected role {expected_role}, got {role}")
    return row["action"], json.loads(row["params"])


def peek(key: str, default: Any = None) -> Any:
    """Params under ``key``, or ``default`` when missing or expired."""
    try:
        _, params = get(key)
    except (StateNotFound, StateExpired):
        return default
    return params


def delete(key: str) -> None:
    _ensure_table()
    with db() as conn:
        conn.execute("DELETE FROM state_store WHERE key = ?", (key,))
        conn.commit()


def delete_prefix(prefix: str) -> int:
    _ensure_table()
    with db() as conn:
        cur = conn.execute(
            "DELETE FROM state_store WHERE substr(key, 1, ?) = ?", (len(prefix), prefix)
        )
        conn.commit()
        return cur.rowcount


def cleanup_expired() -> int:
    """Delete expired records. Returns number of rows removed."""
    _ensure_table()
    with db() as conn:
        cur = conn.execute("DELETE FROM state_store WHERE expires_at_utc < ?", (now(),))
        conn.commit()
        return cur.rowcount

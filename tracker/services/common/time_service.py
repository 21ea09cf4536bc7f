from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from tracker.core.config import cfg


def utc_now_ts() -> int:
    return int(time.time())


def get_tz() -> str:
    """Return display timezone (IANA) from config, 'UTC' when unset."""
    return cfg.tz or "UTC"


def _zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except Exception:
        # Fallback strictly to UTC on invalid tz
        return ZoneInfo("UTC")


def to_local_dt(utc_ts: int, tz: Optional[str] = None) -> datetime:
    zone = _zone(tz or get_tz())
    return datetime.fromtimestamp(int(utc_ts), tz=timezone.utc).astimezone(zone)


def format_date(utc_ts: int, tz: Optional[str] = None) -> str:
    return to_local_dt(utc_ts, tz).strftime("%Y-%m-%d")


def format_datetime(utc_ts: int, tz: Optional[str] = None) -> str:
    return to_local_dt(utc_ts, tz).strftime("%Y-%m-%d %H:%M")


def local_today(tz: Optional[str] = None) -> date:
    return datetime.now(_zone(tz or get_tz())).date()

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def seconds_from_now(seconds: int, now: datetime | None = None) -> datetime:
    if now is None:
        now = utcnow()
    return now + timedelta(seconds=seconds)

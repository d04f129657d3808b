from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

_ONE_SECOND = timedelta(seconds=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current time, timezone-aware UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, clamped to zero when end < start."""
    return max((end - start) // _ONE_SECOND, 0)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert to a naive UTC datetime for MySQL DATETIME columns."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_naive_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime read back from MySQL."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_hhmm(total_seconds: int) -> str:
    minutes = max(int(total_seconds), 0) // 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"

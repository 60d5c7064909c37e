"""Conversions between datetime-local input strings and epoch seconds."""

import math
from datetime import datetime, timedelta, timezone, tzinfo

# Minute resolution, the format a datetime-local input accepts
INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def parse_local_datetime(value: str, tz: tzinfo) -> datetime:
    """Parse an input value; naive values are interpreted in ``tz``.

    Raises:
        ValueError: if the value is not an ISO 8601 date-time.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def to_epoch_seconds(value: str, tz: tzinfo) -> float:
    return parse_local_datetime(value, tz).timestamp()


def round_epoch(seconds: float) -> int:
    """Round half up to a whole second, as the backend path expects."""
    return math.floor(seconds + 0.5)


def format_input(value: datetime, tz: tzinfo) -> str:
    return value.astimezone(tz).strftime(INPUT_FORMAT)


def default_export_window(
    tz: tzinfo,
    now: datetime | None = None,
    minutes: int = 60,
) -> tuple[str, str]:
    """Return (start, end) input values for the trailing window ending now."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    start = now - timedelta(minutes=minutes)
    return format_input(start, tz), format_input(now, tz)

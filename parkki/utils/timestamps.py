# parkki/utils/timestamps.py
"""
Timestamp helpers. Datetimes are stored naive in UTC and rendered as RFC 3339 with a Z suffix.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (storage representation)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 / RFC 3339 string into a naive UTC datetime.
    A trailing Z is accepted; a value without offset is taken as UTC.
    Fractions of a second may have any number of digits (Python 3.11+),
    anything past microseconds is truncated.

    Raises ValueError when the string is not a timestamp, OverflowError
    when the offset pushes it outside the representable range.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00").replace("z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_rfc3339(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"

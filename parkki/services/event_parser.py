# parkki/services/event_parser.py
"""
Structural validation of raw event payloads submitted by cameras.
Turns a list of JSON objects into ParsedEvent records, or raises
ValidationError naming the first offending field. A batch is accepted
whole or not at all, so nothing here touches the database.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List

from parkki.config import settings
from parkki.exceptions import ValidationError
from parkki.utils.timestamps import parse_timestamp

MAX_TYPE_LENGTH = 100
MAX_CAMERA_ID_LENGTH = 100


@dataclass
class ParsedEvent:
    type: str               # free-form label, e.g. "motion"
    timestamp: datetime     # detection time, naive UTC
    confidence: float       # 0.0 – 1.0


def validate_camera_id(camera_id: Any) -> str:
    if not isinstance(camera_id, str) or not camera_id.strip():
        raise ValidationError("camera_id", "must be a non-empty string")
    if len(camera_id) > MAX_CAMERA_ID_LENGTH:
        raise ValidationError("camera_id", f"must be at most {MAX_CAMERA_ID_LENGTH} characters")
    return camera_id


def parse_event_payload(raw: Any, index: int = 0) -> ParsedEvent:
    """Validate one payload. `index` is its position in the batch, used in field paths."""
    prefix = f"events[{index}]"
    if not isinstance(raw, dict):
        raise ValidationError(prefix, "must be an object")

    event_type = raw.get("type")
    if not isinstance(event_type, str) or not event_type.strip():
        raise ValidationError(f"{prefix}.type", "is required and must be a non-empty string")
    if len(event_type) > MAX_TYPE_LENGTH:
        raise ValidationError(f"{prefix}.type", f"must be at most {MAX_TYPE_LENGTH} characters")

    ts = raw.get("timestamp")
    if not isinstance(ts, str):
        raise ValidationError(f"{prefix}.timestamp", "is required and must be an RFC 3339 string")
    try:
        timestamp = parse_timestamp(ts)
    except (ValueError, OverflowError):
        raise ValidationError(f"{prefix}.timestamp", f"cannot parse {ts!r} as a timestamp")

    confidence = raw.get("confidence")
    # bool is an int subclass; True must not pass as 1.0
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ValidationError(f"{prefix}.confidence", "is required and must be a number")
    if not 0.0 <= confidence <= 1.0:
        raise ValidationError(f"{prefix}.confidence", f"must be between 0 and 1, got {confidence}")

    return ParsedEvent(type=event_type.strip(), timestamp=timestamp, confidence=float(confidence))


def parse_event_batch(camera_id: Any, raw_events: Any) -> List[ParsedEvent]:
    """Validate a whole batch in input order. Raises on the first invalid payload."""
    validate_camera_id(camera_id)

    if not isinstance(raw_events, (list, tuple)):
        raise ValidationError("events", "must be a list of event objects")
    if not raw_events:
        raise ValidationError("events", "batch must contain at least one event")
    if len(raw_events) > settings.MAX_BATCH_SIZE:
        raise ValidationError("events", f"batch exceeds {settings.MAX_BATCH_SIZE} events")

    return [parse_event_payload(raw, i) for i, raw in enumerate(raw_events)]

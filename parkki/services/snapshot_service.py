# parkki/services/snapshot_service.py
"""
Snapshot service — derives the "last event" summary stored on a camera.

Called once per inserted event, inside the batch transaction, so the camera
row never points at an event that was rolled back.
"""

from parkki.models.event import Event
from parkki.utils.timestamps import to_rfc3339


def confidence_percent(confidence: float) -> int:
    """0.87 → 87. Halves round up (0.125 → 13)."""
    return int(confidence * 100 + 0.5)


def build_summary(event_type: str, confidence: float) -> str:
    label = event_type[:1].upper() + event_type[1:]
    return f"{label} detected ({confidence_percent(confidence)}%)"


def build_snapshot(event: Event) -> dict:
    """Snapshot written to Camera.last_event for a freshly inserted event."""
    return {
        "id": event.id,
        "type": event.type,
        "timestamp": to_rfc3339(event.timestamp),
        "confidence": event.confidence,
        "received_at": to_rfc3339(event.received_at),
        "summary": build_summary(event.type, event.confidence),
    }

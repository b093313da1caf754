# parkki/schemas/event.py
from pydantic import BaseModel, field_serializer
from datetime import datetime
from typing import List
from parkki.utils.timestamps import to_rfc3339


class EventOut(BaseModel):
    id: str
    camera_id: str
    type: str
    confidence: float
    timestamp: datetime
    received_at: datetime

    @field_serializer("timestamp", "received_at")
    def serialize_utc(self, value: datetime) -> str:
        return to_rfc3339(value)

    class Config:
        from_attributes = True


class SubmitEventsOut(BaseModel):
    status: str = "success"
    accepted_count: int
    event_ids: List[str]


class EventNotification(BaseModel):
    """Message pushed to live subscribers for every committed event."""
    camera_id: str
    event_id: str
    event_type: str
    timestamp: str
    confidence: float

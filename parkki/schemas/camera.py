# parkki/schemas/camera.py
from pydantic import BaseModel, Field, field_serializer
from datetime import datetime
from typing import Literal, Optional
from parkki.utils.timestamps import to_rfc3339


class LastEventSnapshot(BaseModel):
    id: str
    type: str
    timestamp: str
    confidence: float
    received_at: str
    summary: str


class CameraCreate(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=200)
    status: Literal["online", "offline"] = "offline"


class CameraOut(BaseModel):
    id: str
    name: str
    status: Optional[str]
    last_event: Optional[LastEventSnapshot]
    created_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def serialize_utc(self, value: datetime) -> str:
        return to_rfc3339(value)

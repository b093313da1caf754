"""
Cameras table.
One row per sensor. `last_event` is a denormalized snapshot of the camera's
most recently committed event, rewritten by the ingestion pipeline.
"""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import relationship
from parkki.database import Base

CAMERA_STATUSES = ("online", "offline")


class Camera(Base):
    __tablename__ = "cameras"

    id = Column(String(100), primary_key=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20))                  # online | offline, NULL = not yet known
    last_event = Column(JSON)                    # {id, type, timestamp, confidence, received_at, summary}
    created_at = Column(DateTime, nullable=False, index=True)

    events = relationship("Event", back_populates="camera",
                          cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Camera {self.id} status={self.status}>"

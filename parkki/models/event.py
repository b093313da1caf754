"""
Detection events table.
Append-only: rows are written by the ingestion pipeline and never updated.
Deleting a camera deletes its events (ON DELETE CASCADE).
"""

from sqlalchemy import Column, String, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from parkki.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True)      # uuid4, server generated
    camera_id = Column(String(100), ForeignKey("cameras.id", ondelete="CASCADE"),
                       nullable=False, index=True)
    type = Column(String(100), nullable=False, index=True)
    confidence = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False)       # detection time, client supplied (UTC)
    received_at = Column(DateTime, nullable=False, index=True)

    camera = relationship("Camera", back_populates="events")

    def __repr__(self):
        return f"<Event {self.id} type={self.type} cam={self.camera_id}>"

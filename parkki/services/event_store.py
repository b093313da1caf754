# parkki/services/event_store.py
"""
Event Store — every read and write statement against cameras and events.

Writes go through run_transaction(): the unit of work runs in one session
and is committed once, or rolled back as a whole. Only the ingestion
coordinator writes events and snapshots; the routers use the read helpers.
"""

import enum
from datetime import datetime
from typing import Callable, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from parkki.database import begin_write
from parkki.exceptions import StorageError
from parkki.models.camera import Camera
from parkki.models.event import Event
from parkki.services.event_parser import ParsedEvent
from parkki.utils.logger import get_logger
from parkki.utils.timestamps import utcnow

logger = get_logger(__name__)

T = TypeVar("T")


class UpsertOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"


def default_camera_name(camera_id: str) -> str:
    return f"Camera-{camera_id}"


def run_transaction(session_factory: sessionmaker, unit_of_work: Callable[[Session], T]) -> T:
    """
    Run `unit_of_work(db)` inside a single transaction that holds the write
    lock from its first statement, so `received_at` stamps follow commit order.

    Commits when it returns. Any database error rolls everything back and is
    re-raised as StorageError with a generic message; other exceptions roll
    back and propagate unchanged.
    """
    db = session_factory()
    try:
        begin_write(db)
        result = unit_of_work(db)
        db.commit()
        return result
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {e}", exc_info=True)
        raise StorageError() from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ── Writes (inside run_transaction) ──────────────────────────────────────────

def upsert_camera(db: Session, camera_id: str) -> Tuple[Camera, UpsertOutcome]:
    """Load the camera, creating it online with a derived name if it is unknown."""
    camera = db.query(Camera).filter(Camera.id == camera_id).first()
    if camera:
        return camera, UpsertOutcome.UPDATED

    camera = Camera(id=camera_id, name=default_camera_name(camera_id),
                    status="online", created_at=utcnow())
    db.add(camera)
    db.flush()
    logger.info(f"Camera {camera_id} registered on first event")
    return camera, UpsertOutcome.CREATED


def insert_event(db: Session, event_id: str, camera_id: str,
                 parsed: ParsedEvent, received_at: datetime) -> Event:
    row = Event(
        id=event_id,
        camera_id=camera_id,
        type=parsed.type,
        confidence=parsed.confidence,
        timestamp=parsed.timestamp,
        received_at=received_at,
    )
    db.add(row)
    db.flush()
    return row


def update_camera_snapshot(db: Session, camera: Camera, snapshot: dict) -> None:
    """Point the camera at its newest event. Status is only filled in when unknown."""
    camera.last_event = snapshot
    if camera.status is None:
        camera.status = "online"
    db.flush()


def create_camera(db: Session, camera_id: str, name: Optional[str] = None,
                  status: str = "offline") -> Camera:
    """Explicit registration. Commits immediately."""
    camera = Camera(id=camera_id, name=name or default_camera_name(camera_id),
                    status=status, created_at=utcnow())
    db.add(camera)
    db.commit()
    db.refresh(camera)
    return camera


# ── Reads ────────────────────────────────────────────────────────────────────

def get_camera(db: Session, camera_id: str) -> Optional[Camera]:
    return db.query(Camera).filter(Camera.id == camera_id).first()


def list_cameras(db: Session) -> List[Camera]:
    return db.query(Camera).order_by(Camera.created_at.desc()).all()


def list_events(db: Session, camera_id: Optional[str] = None, limit: int = 50) -> List[Event]:
    """Committed events, most recent first."""
    q = db.query(Event)
    if camera_id:
        q = q.filter(Event.camera_id == camera_id)
    return q.order_by(Event.received_at.desc()).limit(limit).all()

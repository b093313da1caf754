# parkki/services/ingestion_service.py
"""
Ingestion Coordinator — the single write path for camera events.

A batch for one camera goes through three phases:
  1. validate every payload (reject the whole batch on the first error)
  2. one transaction: upsert camera, then per event in input order
     insert + rewrite the camera snapshot; commit or roll back all of it
  3. after commit only, broadcast one notification per event, in order

Subscribers therefore never hear about an event that was rolled back, and
the ids returned to the caller are exactly the ids that were persisted.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from parkki.database import SessionLocal
from parkki.schemas.event import EventNotification
from parkki.services.broadcast_hub import BroadcastHub, broadcast_hub
from parkki.services.event_parser import ParsedEvent, parse_event_batch
from parkki.services.event_store import (
    UpsertOutcome,
    insert_event,
    run_transaction,
    update_camera_snapshot,
    upsert_camera,
)
from parkki.services.snapshot_service import build_snapshot
from parkki.utils.logger import get_logger
from parkki.utils.timestamps import to_rfc3339, utcnow

logger = get_logger(__name__)


@dataclass
class CommittedEvent:
    id: str
    camera_id: str
    type: str
    confidence: float
    timestamp: datetime
    received_at: datetime

    def to_notification(self) -> Dict[str, Any]:
        return EventNotification(
            camera_id=self.camera_id,
            event_id=self.id,
            event_type=self.type,
            timestamp=to_rfc3339(self.timestamp),
            confidence=self.confidence,
        ).model_dump()


@dataclass
class SubmitResult:
    accepted_count: int
    event_ids: List[str] = field(default_factory=list)
    camera_outcome: Optional[UpsertOutcome] = None


def _next_received_at(previous: Optional[datetime]) -> datetime:
    """Current time, nudged forward so stamps within a batch strictly increase."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class IngestionCoordinator:
    def __init__(self, session_factory: sessionmaker, hub: BroadcastHub):
        self.session_factory = session_factory
        self.hub = hub

    def _persist_batch(self, camera_id: str, parsed: Sequence[ParsedEvent]):
        """Unit of work for run_transaction. Returns plain records, safe to use after the session closes."""
        def unit_of_work(db: Session):
            camera, outcome = upsert_camera(db, camera_id)
            committed: List[CommittedEvent] = []
            received_at = None
            for item in parsed:
                received_at = _next_received_at(received_at)
                row = insert_event(db, str(uuid.uuid4()), camera_id, item, received_at)
                update_camera_snapshot(db, camera, build_snapshot(row))
                committed.append(CommittedEvent(
                    id=row.id, camera_id=row.camera_id, type=row.type,
                    confidence=row.confidence, timestamp=row.timestamp,
                    received_at=row.received_at,
                ))
            return committed, outcome

        return run_transaction(self.session_factory, unit_of_work)

    async def submit_events(self, camera_id: str, events: Sequence[Any]) -> SubmitResult:
        """
        Validate, persist and broadcast a batch of raw event payloads for one camera.

        Raises ValidationError (nothing persisted, nothing broadcast) or
        StorageError (transaction rolled back, nothing broadcast).
        """
        parsed = parse_event_batch(camera_id, events)

        committed, outcome = await run_in_threadpool(self._persist_batch, camera_id, parsed)
        logger.info(f"Accepted {len(committed)} event(s) for camera {camera_id} ({outcome.value})")

        await self.hub.publish_all(c.to_notification() for c in committed)

        return SubmitResult(
            accepted_count=len(committed),
            event_ids=[c.id for c in committed],
            camera_outcome=outcome,
        )


ingestion_coordinator = IngestionCoordinator(SessionLocal, broadcast_hub)


def get_ingestion_coordinator() -> IngestionCoordinator:
    """FastAPI dependency — the application-wide coordinator."""
    return ingestion_coordinator

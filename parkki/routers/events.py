# parkki/routers/events.py
"""
Event ingestion endpoint + committed event log.
POST /cameras/{camera_id}/events — accepts a batch (list) or a single event object.
GET  /events                     — committed events, most recent first.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from parkki.config import settings
from parkki.database import get_db
from parkki.schemas.event import EventOut, SubmitEventsOut
from parkki.services.event_store import list_events
from parkki.services.ingestion_service import IngestionCoordinator, get_ingestion_coordinator
from parkki.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/cameras/{camera_id}/events", response_model=SubmitEventsOut,
             summary="Submit a batch of detection events for one camera")
async def submit_camera_events(
    camera_id: str,
    payload: Any = Body(...),
    coordinator: IngestionCoordinator = Depends(get_ingestion_coordinator),
):
    """
    All-or-nothing: either every event in the batch is stored and broadcast,
    or none is. ValidationError → 422, StorageError → 500 (see main.py handlers).
    """
    events = [payload] if isinstance(payload, dict) else payload
    logger.debug(f"Batch for {camera_id}: {len(events) if isinstance(events, list) else '?'} event(s)")
    result = await coordinator.submit_events(camera_id, events)
    return SubmitEventsOut(accepted_count=result.accepted_count, event_ids=result.event_ids)


@router.get("/events", response_model=list[EventOut], summary="List committed events")
def get_events(
    camera_id: Optional[str] = None,
    limit: int = Query(settings.EVENTS_LIST_LIMIT, ge=1, le=settings.EVENTS_LIST_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    """Returns committed events, newest first, optionally for one camera."""
    return list_events(db, camera_id=camera_id, limit=limit)

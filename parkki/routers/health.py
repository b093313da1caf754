# parkki/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + number of live subscribers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from parkki.database import get_db
from parkki.services.broadcast_hub import get_broadcast_hub
from parkki.utils.timestamps import to_rfc3339, utcnow

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": to_rfc3339(utcnow()),
        "backend": "ok",
        "database": "unknown",
        "subscribers": get_broadcast_hub().subscriber_count(),
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {type(e).__name__}"
        result["status"] = "degraded"

    return result

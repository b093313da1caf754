# parkki/main.py
"""
FastAPI application entry point.
Wires CORS, request timing, error handlers for the ingestion error taxonomy,
and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from parkki.routers import events, cameras, websocket, health
from parkki.database import create_tables
from parkki.config import settings
from parkki.exceptions import StorageError, ValidationError
from parkki.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parkki Camera Event API",
    description="Camera detection event ingestion with live WebSocket fan-out.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (dashboard is served from another origin) ──────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected batch on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.to_dict()},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    # Underlying DB error is already logged by the event store; keep it out of the response.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(events.router,    prefix="/api/v1", tags=["📡 Camera Events"])
app.include_router(cameras.router,   prefix="/api/v1", tags=["📷 Cameras"])
app.include_router(websocket.router, prefix="/api/v1", tags=["🔴 Live"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])

# Dashboards connect to ws://host:port/events without the API prefix
app.add_api_websocket_route("/events", websocket.live_events)


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Parkki camera event API - v1.0", "documentation": "/docs"}


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parkki backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parkki backend shutting down...")

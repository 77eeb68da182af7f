"""Main application entry point for the team status service.

This module defines the FastAPI application, configures logging and maps
the availability engine's errors onto HTTP responses. Storage is an
external collaborator; by default an in-memory store is used, which is
enough for a single-process deployment and for tests.

Endpoints:
  - ``PUT /api/users/{user_id}/status``: save a status update.
  - ``GET /api/users/{user_id}/status``: return one user's snapshot.
  - ``GET /api/status``: return every snapshot for the team board.
  - ``POST /api/availability/slots``: find common free slots.
  - ``POST /api/availability/check``: check a concrete window.
  - ``POST /api/meetings`` / ``GET /api/meetings``: book and list meetings.
  - ``/healthz``: simple health check endpoint.

A failed busy-block fetch during slot search does not fail the request
when placeholder slots are enabled; the response is marked ``degraded``
and the error is surfaced via its ``lastError`` field.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .errors import BookingConflict, InvalidRequest, StoreError
from .fallback import NoFallback, PlaceholderSlots
from .models import (
    AvailabilityCheckRequest,
    AvailabilityCheckResult,
    BookingRequest,
    Meeting,
    SlotSearchRequest,
    SlotSearchResult,
    StatusSnapshot,
    StatusUpdate,
)
from .service import AvailabilityService
from .store import InMemoryStatusStore

logger = logging.getLogger("statusboard")
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Team Status Service")

# CORS is off by default because the dashboard and API share an origin.
if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )

_zone = ZoneInfo(settings.time_zone)


def _local_now() -> datetime:
    """Return the current wall-clock time in the configured time zone."""
    return datetime.now(_zone)


_service = AvailabilityService(
    InMemoryStatusStore(),
    config=settings,
    fallback=(
        PlaceholderSlots(settings.work_start_hour, settings.work_end_hour)
        if settings.fallback_slots
        else NoFallback()
    ),
    clock=_local_now,
)


def get_service() -> AvailabilityService:
    """Dependency returning the process-wide service; overridden in tests."""
    return _service


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": getattr(exc, "kind", type(exc).__name__), "detail": str(exc)},
    )


@app.exception_handler(InvalidRequest)
async def _invalid_request(request: Request, exc: InvalidRequest) -> JSONResponse:
    return _error(400, exc)


@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    if isinstance(exc, BookingConflict):
        return _error(409, exc)
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return _error(503, exc)


@app.put("/api/users/{user_id}/status", response_model=StatusSnapshot)
def put_status(
    user_id: str,
    update: StatusUpdate,
    service: AvailabilityService = Depends(get_service),
) -> StatusSnapshot:
    """Save a user's status, recomputing its color server side."""
    return service.save_status(user_id, update)


@app.get("/api/users/{user_id}/status", response_model=StatusSnapshot)
def get_status(user_id: str, service: AvailabilityService = Depends(get_service)) -> StatusSnapshot:
    snapshot = service.get_status(user_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail=f"no status for {user_id}")
    return snapshot


@app.get("/api/status")
def api_status(service: AvailabilityService = Depends(get_service)) -> Dict[str, Any]:
    """Return every stored snapshot for the team board."""
    items = service.team_status()
    return {
        "generatedAt": service.clock().isoformat(),
        "count": len(items),
        "items": [s.model_dump(mode="json") for s in items],
    }


@app.post("/api/availability/slots", response_model=SlotSearchResult)
def api_slots(
    body: SlotSearchRequest,
    service: AvailabilityService = Depends(get_service),
) -> SlotSearchResult:
    """Return common free slots, or placeholder slots if the fetch failed."""
    return service.search_slots(body)


@app.post("/api/availability/check", response_model=AvailabilityCheckResult)
def api_check(
    body: AvailabilityCheckRequest,
    service: AvailabilityService = Depends(get_service),
) -> AvailabilityCheckResult:
    return service.check_availability(body)


@app.post("/api/meetings", response_model=Meeting, status_code=201)
def api_book(
    body: BookingRequest,
    x_user_id: str = Header(..., alias="X-User-Id"),
    service: AvailabilityService = Depends(get_service),
) -> Meeting:
    """Book a meeting for the calling user and the chosen participants."""
    return service.book_meeting(x_user_id, body)


@app.get("/api/meetings")
def api_meetings(service: AvailabilityService = Depends(get_service)) -> Dict[str, Any]:
    meetings = service.list_meetings()
    return {"count": len(meetings), "items": [m.model_dump(mode="json") for m in meetings]}


@app.get("/healthz")
def healthz(service: AvailabilityService = Depends(get_service)) -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return {"ok": True, "time": service.clock().isoformat()}

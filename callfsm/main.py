"""
Call Lifecycle Service - API
============================
FastAPI application for creating calls and driving them through the FSM
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from pydantic import BaseModel

from callfsm.calls import CallLimitReached, CallNotFound, CallRegistry
from callfsm.config import get_settings
from callfsm.core import (
    DEFAULT_TRANSITIONS,
    ActionFailed,
    CallEvent,
    CallState,
    InvalidTransition,
)
from callfsm.log import configure_logging


settings = get_settings()
logger = logging.getLogger(__name__)

_registry = CallRegistry(max_calls=settings.max_calls)


def get_registry() -> CallRegistry:
    """Registry dependency (overridden in tests)"""
    return _registry


app = FastAPI(
    title="Call Lifecycle Service",
    description="FSM-driven call state tracking",
    version="1.0.0",
)


# ── Request/Response Models ───────────────────────────────────────────────────

class CallCreateRequest(BaseModel):
    caller_id: Optional[str] = None


class EventRequest(BaseModel):
    event: CallEvent


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.get("/")
async def root():
    return {
        "service": "Call Lifecycle Service",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/transitions")
async def list_transitions():
    """The default call flow"""
    return {
        "initial_state": CallState.IDLE.value,
        "transitions": [
            {"from_state": state.value, "event": event.value, "to_state": target.value}
            for (state, event), target in DEFAULT_TRANSITIONS.items()
        ],
    }


@app.post("/calls", status_code=201)
def create_call(request: CallCreateRequest, registry: CallRegistry = Depends(get_registry)):
    """Start tracking a new call in IDLE"""
    try:
        call = registry.create(caller_id=request.caller_id)
    except CallLimitReached as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return call.snapshot()


@app.get("/calls")
def list_calls(
    limit: int = Query(10, ge=0),
    state: Optional[CallState] = None,
    registry: CallRegistry = Depends(get_registry),
):
    """List calls with optional state filter"""
    calls = registry.list_calls(state=state, limit=limit)
    return {
        "count": len(calls),
        "calls": [call.snapshot() for call in calls],
    }


@app.get("/calls/{call_id}")
def get_call(call_id: str, registry: CallRegistry = Depends(get_registry)):
    """Get current state of a call"""
    try:
        call = registry.get(call_id)
    except CallNotFound:
        raise HTTPException(status_code=404, detail="Call not found")
    return call.snapshot()


@app.post("/calls/{call_id}/events")
def apply_event(
    call_id: str,
    request: EventRequest,
    registry: CallRegistry = Depends(get_registry),
):
    """
    Feed one event to a call.

    409: the event makes no sense in the current state.
    422: the transition exists but its action refused it.
    """
    try:
        new_state = registry.apply_event(call_id, request.event)
    except CallNotFound:
        raise HTTPException(status_code=404, detail="Call not found")
    except InvalidTransition as exc:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "invalid_transition",
                "state": exc.state.value,
                "event": exc.event.value,
                "message": str(exc),
            },
        )
    except ActionFailed as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "error": "action_failed",
                "state": exc.state.value,
                "event": exc.event.value,
                "message": exc.detail,
            },
        )

    return {
        "call_id": call_id,
        "event": request.event.value,
        "state": new_state.value,
    }


@app.delete("/calls/{call_id}", status_code=204)
def delete_call(call_id: str, registry: CallRegistry = Depends(get_registry)):
    """Stop tracking a call"""
    try:
        registry.remove(call_id)
    except CallNotFound:
        raise HTTPException(status_code=404, detail="Call not found")
    return Response(status_code=204)


def run():
    import uvicorn

    configure_logging(settings.log_level)
    logger.info("Starting on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

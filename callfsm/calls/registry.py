"""
Call Registry
=============
One StateMachine per call, kept in memory.
Each call has its own lock; the machines themselves are not thread-safe.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from callfsm.core import (
    DEFAULT_TRANSITIONS,
    CallEvent,
    CallState,
    StateMachine,
    TransitionError,
    TransitionTable,
)


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CallNotFound(KeyError):
    def __init__(self, call_id: str):
        super().__init__(call_id)
        self.call_id = call_id

    def __str__(self) -> str:
        return f"Call {self.call_id} not found"


class CallLimitReached(RuntimeError):
    pass


# ── Call table ────────────────────────────────────────────────────────────────

def build_call_table(clock: Callable[[], datetime] = utcnow) -> TransitionTable:
    """
    Same moves as DEFAULT_TRANSITIONS, but every action also keeps
    the call context up to date.
    """

    def counted(action):
        def wrapper(state, event, context):
            next_state = action(state, event, context)
            context["transitions"] = context.get("transitions", 0) + 1
            return next_state
        return wrapper

    def start(direction):
        def action(state, event, context):
            context["direction"] = direction
            context["started_at"] = clock().isoformat()
            return DEFAULT_TRANSITIONS[(state, event)]
        return action

    def answer(state, event, context):
        context["answered_at"] = clock().isoformat()
        return DEFAULT_TRANSITIONS[(state, event)]

    def hang_up(state, event, context):
        context["ended_at"] = clock().isoformat()
        answered_at = context.get("answered_at")
        if answered_at is not None:
            elapsed = clock() - datetime.fromisoformat(answered_at)
            context["duration_s"] = round(elapsed.total_seconds(), 3)
        return DEFAULT_TRANSITIONS[(state, event)]

    def reset(state, event, context):
        for key in ("direction", "started_at", "answered_at", "ended_at", "duration_s"):
            context.pop(key, None)
        return DEFAULT_TRANSITIONS[(state, event)]

    table = TransitionTable.from_targets(DEFAULT_TRANSITIONS)
    (
        table
        .register(CallState.IDLE, CallEvent.DIAL, counted(start("outbound")))
        .register(CallState.IDLE, CallEvent.INCOMING, counted(start("inbound")))
        .register(CallState.RINGING, CallEvent.ANSWER, counted(answer))
        .register(CallState.DIALING, CallEvent.HANG_UP, counted(hang_up))
        .register(CallState.RINGING, CallEvent.HANG_UP, counted(hang_up))
        .register(CallState.CONNECTED, CallEvent.HANG_UP, counted(hang_up))
        .register(CallState.DISCONNECTED, CallEvent.RESET, counted(reset))
    )
    return table


# ── Registry ──────────────────────────────────────────────────────────────────

@dataclass
class Call:
    """A single call and the machine driving it"""
    id: str
    machine: StateMachine
    created_at: datetime = field(default_factory=utcnow)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def state(self) -> CallState:
        return self.machine.current_state

    def snapshot(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "id": self.id,
                "state": self.machine.current_state.value,
                "context": dict(self.machine.context),
                "available_events": [e.value for e in self.machine.available_events()],
                "created_at": self.created_at.isoformat(),
            }


class CallRegistry:
    """Create, find and drive calls"""

    def __init__(self, table: Optional[TransitionTable] = None, max_calls: int = 1000):
        # Shared by every call; never written after this point
        self.table = table if table is not None else build_call_table()
        self.max_calls = max_calls
        self._calls: Dict[str, Call] = {}
        self._lock = threading.Lock()

    def create(self, caller_id: Optional[str] = None) -> Call:
        context: Dict[str, Any] = {"transitions": 0}
        if caller_id:
            context["caller_id"] = caller_id

        call = Call(id=str(uuid.uuid4()), machine=StateMachine(context, table=self.table))

        with self._lock:
            if len(self._calls) >= self.max_calls:
                raise CallLimitReached(f"Registry is full ({self.max_calls} calls)")
            self._calls[call.id] = call

        logger.info("🆕 Call %s created (caller_id=%s)", call.id[:8], caller_id)
        return call

    def get(self, call_id: str) -> Call:
        with self._lock:
            call = self._calls.get(call_id)
        if call is None:
            raise CallNotFound(call_id)
        return call

    def list_calls(self, state: Optional[CallState] = None, limit: Optional[int] = None) -> list:
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        with self._lock:
            calls = list(self._calls.values())
        if state is not None:
            calls = [c for c in calls if c.state == state]
        return calls[:limit] if limit is not None else calls

    def remove(self, call_id: str) -> None:
        with self._lock:
            if self._calls.pop(call_id, None) is None:
                raise CallNotFound(call_id)
        logger.info("🗑️ Call %s removed", call_id[:8])

    def apply_event(self, call_id: str, event: CallEvent) -> CallState:
        """
        Drive one call. InvalidTransition / ActionFailed propagate
        to the caller untouched; we only log them.
        """
        call = self.get(call_id)

        with call.lock:
            old_state = call.machine.current_state
            try:
                new_state = call.machine.handle_event(event)
            except TransitionError as exc:
                logger.warning("🛑 Call %s: %s", call_id[:8], exc)
                raise

        logger.info(
            "✅ Call %s: %s + %s → %s",
            call_id[:8], old_state.value, event.value, new_state.value,
        )
        return new_state

    def __len__(self) -> int:
        with self._lock:
            return len(self._calls)

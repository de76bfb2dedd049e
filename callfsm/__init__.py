"""Call lifecycle state machine."""

from callfsm.core import (
    DEFAULT_TRANSITIONS,
    ActionFailed,
    CallEvent,
    CallState,
    InvalidTransition,
    StateMachine,
    TransitionError,
    TransitionTable,
    build_default_table,
    goto,
)

__version__ = "1.0.0"

__all__ = [
    "CallState",
    "CallEvent",
    "DEFAULT_TRANSITIONS",
    "build_default_table",
    "StateMachine",
    "TransitionTable",
    "TransitionError",
    "InvalidTransition",
    "ActionFailed",
    "goto",
]

from callfsm.core.call_states import (
    DEFAULT_TRANSITIONS,
    INITIAL_STATE,
    CallEvent,
    CallState,
    build_default_table,
)
from callfsm.core.errors import ActionFailed, InvalidTransition, TransitionError
from callfsm.core.state_machine import StateMachine
from callfsm.core.transition_table import TransitionAction, TransitionTable, goto

__all__ = [
    "CallState",
    "CallEvent",
    "INITIAL_STATE",
    "DEFAULT_TRANSITIONS",
    "build_default_table",
    "TransitionError",
    "InvalidTransition",
    "ActionFailed",
    "StateMachine",
    "TransitionAction",
    "TransitionTable",
    "goto",
]

"""
Call Lifecycle States
A call is in exactly ONE of these states at any time
"""

from enum import Enum

from callfsm.core.transition_table import TransitionTable


class CallState(str, Enum):
    IDLE = "IDLE"                  # No call
    DIALING = "DIALING"            # Outgoing call placed
    RINGING = "RINGING"            # Incoming call waiting
    CONNECTED = "CONNECTED"        # Both legs talking
    DISCONNECTED = "DISCONNECTED"  # Call over, waiting for reset


class CallEvent(str, Enum):
    DIAL = "DIAL"
    INCOMING = "INCOMING"
    ANSWER = "ANSWER"
    HANG_UP = "HANG_UP"
    RESET = "RESET"


INITIAL_STATE = CallState.IDLE

# Default call flow: (current_state, event) → next_state
DEFAULT_TRANSITIONS = {
    # Setup
    (CallState.IDLE, CallEvent.DIAL): CallState.DIALING,
    (CallState.IDLE, CallEvent.INCOMING): CallState.RINGING,

    # Ringing / dialing
    (CallState.DIALING, CallEvent.HANG_UP): CallState.DISCONNECTED,
    (CallState.RINGING, CallEvent.ANSWER): CallState.CONNECTED,
    (CallState.RINGING, CallEvent.HANG_UP): CallState.DISCONNECTED,

    # In call
    (CallState.CONNECTED, CallEvent.HANG_UP): CallState.DISCONNECTED,

    # Back to the start
    (CallState.DISCONNECTED, CallEvent.RESET): CallState.IDLE,
}


def build_default_table() -> TransitionTable:
    """Fresh table seeded with DEFAULT_TRANSITIONS. Safe to modify."""
    return TransitionTable.from_targets(DEFAULT_TRANSITIONS)

"""
Transition Errors
=================
Two ways handle_event can fail. Both leave the machine where it was.
"""

from enum import Enum
from typing import Optional


class TransitionError(ValueError):
    """Base class for every failed transition"""

    def __init__(self, state: Enum, event: Enum, message: str):
        super().__init__(message)
        self.state = state
        self.event = event


class InvalidTransition(TransitionError):
    """No table entry for (state, event)"""

    def __init__(self, state: Enum, event: Enum):
        super().__init__(
            state,
            event,
            f"Illegal transition: {_name(state)} + {_name(event)} is not allowed",
        )


class ActionFailed(TransitionError):
    """The entry exists, but its action refused to produce a next state"""

    def __init__(self, state: Enum, event: Enum, detail: Optional[str] = None):
        self.detail = detail or "transition action failed"
        super().__init__(
            state,
            event,
            f"Action for {_name(state)} + {_name(event)} failed: {self.detail}",
        )


def _name(member) -> str:
    return getattr(member, "value", str(member))

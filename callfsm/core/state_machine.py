"""
Call State Machine
==================
Look up (current_state, event), run the action, move to what it returns.
"""

from enum import Enum
from typing import Any, Dict, Optional

from callfsm.core.call_states import INITIAL_STATE, build_default_table
from callfsm.core.errors import ActionFailed, InvalidTransition
from callfsm.core.transition_table import TransitionTable


class StateMachine:
    """
    One machine per call. Not thread-safe: wrap it in a lock if several
    threads need to drive the same call.
    """

    def __init__(
        self,
        context: Optional[Dict[str, Any]] = None,
        table: Optional[TransitionTable] = None,
        initial_state: Enum = INITIAL_STATE,
    ):
        self._current_state = initial_state
        self._context = context if context is not None else {}
        self._table = table if table is not None else build_default_table()

    @property
    def current_state(self) -> Enum:
        return self._current_state

    @property
    def context(self) -> Dict[str, Any]:
        return self._context

    @property
    def table(self) -> TransitionTable:
        return self._table

    def can_handle(self, event: Enum) -> bool:
        return (self._current_state, event) in self._table

    def available_events(self) -> list:
        return self._table.events_for(self._current_state)

    def handle_event(self, event: Enum) -> Enum:
        """
        Apply an event. Returns the state the machine ends up in.

        Raises InvalidTransition when nothing is registered for
        (current_state, event), and ActionFailed when the registered action
        raises or hands back something that is not a state. Either way the
        current state and the context are left exactly as they were.
        """
        current_state = self._current_state

        # 1. Look up the transition
        action = self._table.lookup(current_state, event)
        if action is None:
            raise InvalidTransition(current_state, event)

        # 2. Run it against a working copy of the context
        scratch = dict(self._context)
        try:
            next_state = action(current_state, event, scratch)
        except Exception as exc:
            raise ActionFailed(current_state, event, str(exc) or type(exc).__name__) from exc

        # None = handled in place, no state change
        if next_state is None:
            next_state = current_state
        elif not isinstance(next_state, type(current_state)):
            raise ActionFailed(
                current_state, event, f"action returned {next_state!r}, not a state"
            )

        # 3. Commit context, then move
        self._context.clear()
        self._context.update(scratch)
        self._current_state = next_state

        return next_state

    def __repr__(self) -> str:
        return f"StateMachine(state={self._current_state!r})"

"""
Transition Table
================
(current_state, event) → action

Same idea as a TRANSITIONS dict, except the value is a callable
instead of a bare next state, so every move can carry its own logic.
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

# action(current_state, event, context) -> next_state (None = stay put)
TransitionAction = Callable[[Enum, Enum, Dict[str, Any]], Optional[Enum]]
TransitionKey = Tuple[Enum, Enum]


def goto(to_state: Enum) -> TransitionAction:
    """Build an action that always moves to `to_state`. One shared action per target."""
    if not isinstance(to_state, Enum):
        raise TypeError(f"Transition target must be an enum member, got {to_state!r}")
    return _goto(to_state)


# typed: str Enums from different classes can share a value
@lru_cache(maxsize=None, typed=True)
def _goto(to_state: Enum) -> TransitionAction:
    def action(state, event, context):
        return to_state

    action.target = to_state
    return action


class TransitionTable:
    """
    Lookup table for a state machine.
    Fill it up front, then hand it to as many machines as you like:
    machines only ever read from it.
    """

    def __init__(self):
        self._actions: Dict[TransitionKey, TransitionAction] = {}

    @classmethod
    def from_targets(cls, targets: Mapping[TransitionKey, Enum]) -> "TransitionTable":
        """Build from a plain {(state, event): next_state} mapping"""
        table = cls()
        for (from_state, event), to_state in targets.items():
            table.register_target(from_state, event, to_state)
        return table

    def register(self, from_state: Enum, event: Enum, action: TransitionAction) -> "TransitionTable":
        """Add or replace the action for (from_state, event). Last write wins."""
        if not isinstance(from_state, Enum) or not isinstance(event, Enum):
            raise TypeError(
                f"Transition keys must be enum members, got {from_state!r} + {event!r}"
            )
        if not callable(action):
            raise TypeError(f"Action for {from_state} + {event} is not callable: {action!r}")

        self._actions[(from_state, event)] = action
        return self

    def register_target(self, from_state: Enum, event: Enum, to_state: Enum) -> "TransitionTable":
        return self.register(from_state, event, goto(to_state))

    def lookup(self, state: Enum, event: Enum) -> Optional[TransitionAction]:
        return self._actions.get((state, event))

    def events_for(self, state: Enum) -> list:
        """Events that have an entry when the machine sits in `state`"""
        return [event for (from_state, event) in self._actions if from_state == state]

    def copy(self) -> "TransitionTable":
        table = TransitionTable()
        table._actions = dict(self._actions)
        return table

    def __contains__(self, key: TransitionKey) -> bool:
        return key in self._actions

    def __iter__(self) -> Iterator[TransitionKey]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    # Mutable container: equality by content, so not hashable
    __hash__ = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self._actions == other._actions

    def __repr__(self) -> str:
        return f"TransitionTable({len(self._actions)} transitions)"

from callfsm.calls.registry import (
    Call,
    CallLimitReached,
    CallNotFound,
    CallRegistry,
    build_call_table,
)

__all__ = ["Call", "CallRegistry", "CallNotFound", "CallLimitReached", "build_call_table"]

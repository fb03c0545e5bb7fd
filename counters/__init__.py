"""Bounded counters and the focus state machine."""

from counters.state import (
    AppState,
    Counter,
    handle_event,
    handle_key,
)

__all__ = ["AppState", "Counter", "handle_event", "handle_key"]

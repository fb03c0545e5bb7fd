"""Counter state and the key-driven transitions that mutate it."""

from __future__ import annotations

from dataclasses import dataclass, field

from common.errors import CounterOverflow, CounterUnderflow
from common.logging_setup import get_logger
from terminal.keys import KeyEvent, KeyEventKind

logger = get_logger(__name__)

DEFAULT_COUNTER_COUNT = 3
DEFAULT_MAX_VALUE = 2

KEY_QUIT = "q"
KEY_FOCUS_PREVIOUS = "h"
KEY_FOCUS_NEXT = "l"
KEY_DECREMENT = "j"
KEY_INCREMENT = "k"


@dataclass
class Counter:
    focused: bool = False
    value: int = 0


@dataclass
class AppState:
    counters: list[Counter] = field(default_factory=list)
    focus_index: int = 0
    exit: bool = False
    max_value: int = DEFAULT_MAX_VALUE

    @classmethod
    def create(
        cls,
        count: int = DEFAULT_COUNTER_COUNT,
        max_value: int = DEFAULT_MAX_VALUE,
    ) -> "AppState":
        """Build the startup state: all counters at 0, the first one focused."""
        if count < 1:
            raise ValueError(f"counter count must be at least 1, got {count}")
        counters = [Counter() for _ in range(count)]
        counters[0].focused = True
        return cls(counters=counters, focus_index=0, exit=False, max_value=max_value)

    @property
    def focused_counter(self) -> Counter:
        return self.counters[self.focus_index]


def quit_app(state: AppState) -> None:
    state.exit = True


def _move_focus(state: AppState, step: int) -> None:
    state.counters[state.focus_index].focused = False
    state.focus_index = (state.focus_index + step) % len(state.counters)
    state.counters[state.focus_index].focused = True
    logger.debug("Focus moved to counter %d", state.focus_index)


def focus_next(state: AppState) -> None:
    _move_focus(state, 1)


def focus_previous(state: AppState) -> None:
    _move_focus(state, -1)


def increment(state: AppState, clamp: bool = False) -> None:
    """Increase the focused counter by one.

    Raises CounterOverflow at the maximum unless ``clamp`` is set, in which
    case the key is ignored. The value is never moved past the maximum.
    """
    counter = state.focused_counter
    if counter.value >= state.max_value:
        if clamp:
            logger.debug("Counter %d held at %d", state.focus_index, state.max_value)
            return
        raise CounterOverflow(state.focus_index, state.max_value)
    counter.value += 1
    logger.debug("Counter %d -> %d", state.focus_index, counter.value)


def decrement(state: AppState, clamp: bool = False) -> None:
    """Decrease the focused counter by one.

    Raises CounterUnderflow at zero unless ``clamp`` is set.
    """
    counter = state.focused_counter
    if counter.value <= 0:
        if clamp:
            logger.debug("Counter %d held at 0", state.focus_index)
            return
        raise CounterUnderflow(state.focus_index)
    counter.value -= 1
    logger.debug("Counter %d -> %d", state.focus_index, counter.value)


def handle_key(key: str, state: AppState, clamp: bool = False) -> None:
    if key == KEY_QUIT:
        quit_app(state)
    elif key == KEY_FOCUS_NEXT:
        focus_next(state)
    elif key == KEY_FOCUS_PREVIOUS:
        focus_previous(state)
    elif key == KEY_DECREMENT:
        decrement(state, clamp=clamp)
    elif key == KEY_INCREMENT:
        increment(state, clamp=clamp)


def handle_event(event: KeyEvent, state: AppState, clamp: bool = False) -> None:
    # Release and repeat events are reported by some platforms; act on presses only.
    if event.kind is not KeyEventKind.PRESS:
        return
    handle_key(event.key, state, clamp=clamp)

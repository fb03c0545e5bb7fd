"""Rendering for the Multi-Counter terminal UI."""

from __future__ import annotations

from rich import box
from rich.align import Align
from rich.layout import Layout
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from counters.state import (
    AppState,
    Counter,
    KEY_DECREMENT,
    KEY_FOCUS_NEXT,
    KEY_FOCUS_PREVIOUS,
    KEY_INCREMENT,
    KEY_QUIT,
)

APP_TITLE = "Multi-Counter"

# Title bar takes 5% of the height; the border needs at least 3 rows.
TITLE_RATIO = 5
BODY_RATIO = 95
TITLE_MIN_ROWS = 3

KEY_STYLE = Style(color="blue", bold=True)
FOCUSED_BORDER = Style(color="blue")

INSTRUCTIONS = [
    ("Decrement", KEY_DECREMENT),
    ("Increment", KEY_INCREMENT),
    ("Left", KEY_FOCUS_PREVIOUS),
    ("Right", KEY_FOCUS_NEXT),
    ("Quit", KEY_QUIT),
]


def create_ui_layout(frame: Layout, counter_count: int) -> Layout:
    """Split the frame into the title bar and one column per counter."""
    frame.split_column(
        Layout(name="title", ratio=TITLE_RATIO, minimum_size=TITLE_MIN_ROWS),
        Layout(name="counters", ratio=BODY_RATIO),
    )
    frame["counters"].split_row(
        *[Layout(name=f"counter-{index}", ratio=1) for index in range(counter_count)]
    )
    return frame


def render_title() -> Panel:
    text = Text()
    for label, key in INSTRUCTIONS:
        text.append(f" {label} ")
        text.append(f"<{key}>", style=KEY_STYLE)
    text.append(" ")
    return Panel(
        Align.center(text),
        title=Text(APP_TITLE, style="bold italic blue on white"),
        title_align="center",
        padding=(0, 0),
    )


def render_counter(counter: Counter) -> Panel:
    """Bordered panel for one counter; the focused one gets a blue border."""
    value_text = Text()
    value_text.append("Value: ")
    value_text.append(str(counter.value), style="yellow")
    return Panel(
        Align.center(value_text, vertical="middle"),
        title=Text(" Counter ", style="bold"),
        title_align="center",
        box=box.HEAVY,
        border_style=FOCUSED_BORDER if counter.focused else Style(),
    )


def render_frame(state: AppState, frame: Layout) -> None:
    create_ui_layout(frame, len(state.counters))
    frame["title"].update(render_title())
    for index, counter in enumerate(state.counters):
        frame[f"counter-{index}"].update(render_counter(counter))

"""Unit tests for TerminalSession lifecycle, with termios and Live patched out."""

from __future__ import annotations

import io
import os
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console
from rich.layout import Layout

from common.errors import InputReadError, TerminalInitError, TerminalRestoreError
from counters.state import AppState, handle_event
from terminal.keys import KeyEvent
from terminal.session import TerminalSession

termios = pytest.importorskip("termios")

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX terminal handling")


class FakeTTY(io.StringIO):
    """In-memory stdin that claims to be a terminal."""

    def isatty(self) -> bool:
        return True

    def fileno(self) -> int:
        return 7


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=80, height=24)


@pytest.fixture
def tty_mocks():
    """Patch the termios/tty calls and the Live display."""
    with patch("termios.tcgetattr", return_value=["saved-attrs"]) as tcgetattr, \
            patch("termios.tcsetattr") as tcsetattr, \
            patch("tty.setcbreak") as setcbreak, \
            patch("terminal.session.Live") as live_cls:
        yield {
            "tcgetattr": tcgetattr,
            "tcsetattr": tcsetattr,
            "setcbreak": setcbreak,
            "live_cls": live_cls,
            "live": live_cls.return_value,
        }


def test_initialize_requires_tty(console, tty_mocks):
    session = TerminalSession(console=console, stdin=io.StringIO())
    with pytest.raises(TerminalInitError):
        session.initialize()
    assert not session.active
    tty_mocks["setcbreak"].assert_not_called()
    tty_mocks["live"].start.assert_not_called()


def test_initialize_wraps_termios_error(console, tty_mocks):
    tty_mocks["tcgetattr"].side_effect = termios.error("not a terminal")
    session = TerminalSession(console=console, stdin=FakeTTY())
    with pytest.raises(TerminalInitError) as excinfo:
        session.initialize()
    assert "not a terminal" in str(excinfo.value)
    assert not session.active
    # Nothing was changed, so restore has nothing to undo.
    session.restore()
    tty_mocks["tcsetattr"].assert_not_called()


def test_initialize_enters_cbreak_and_alternate_screen(console, tty_mocks):
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()

    assert session.active
    tty_mocks["tcgetattr"].assert_called_once_with(7)
    tty_mocks["setcbreak"].assert_called_once_with(7)
    _, kwargs = tty_mocks["live_cls"].call_args
    assert kwargs["screen"] is True
    assert kwargs["auto_refresh"] is False
    assert kwargs["console"] is console
    tty_mocks["live"].start.assert_called_once()


def test_initialize_twice_is_noop(console, tty_mocks):
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()
    session.initialize()
    tty_mocks["live"].start.assert_called_once()


def test_live_start_failure_restores_terminal_mode(console, tty_mocks):
    tty_mocks["live"].start.side_effect = OSError("write failed")
    session = TerminalSession(console=console, stdin=FakeTTY())
    with pytest.raises(TerminalInitError):
        session.initialize()
    tty_mocks["tcsetattr"].assert_called_once_with(7, termios.TCSADRAIN, ["saved-attrs"])


def test_restore_undoes_initialize_once(console, tty_mocks):
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()
    session.restore()
    session.restore()

    tty_mocks["live"].stop.assert_called_once()
    tty_mocks["tcsetattr"].assert_called_once_with(7, termios.TCSADRAIN, ["saved-attrs"])
    assert not session.active


def test_restore_without_initialize_is_noop(console, tty_mocks):
    TerminalSession(console=console, stdin=FakeTTY()).restore()
    tty_mocks["live"].stop.assert_not_called()
    tty_mocks["tcsetattr"].assert_not_called()


def test_restore_failure_raises(console, tty_mocks):
    tty_mocks["tcsetattr"].side_effect = termios.error("bad fd")
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()
    with pytest.raises(TerminalRestoreError) as excinfo:
        session.restore()
    assert "bad fd" in str(excinfo.value)
    tty_mocks["live"].stop.assert_called_once()


def test_draw_passes_frame_to_render_fn(console, tty_mocks):
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()
    seen = []

    def render(frame):
        seen.append(frame)
        frame.update("hello")

    session.draw(render)

    assert len(seen) == 1
    assert isinstance(seen[0], Layout)
    tty_mocks["live"].update.assert_called_once_with(seen[0], refresh=True)


def test_draw_requires_initialize(console):
    session = TerminalSession(console=console, stdin=FakeTTY())
    render = MagicMock()
    with pytest.raises(TerminalInitError):
        session.draw(render)
    render.assert_not_called()


def test_read_event_returns_key_press(console):
    session = TerminalSession(console=console, stdin=FakeTTY("kq"))
    assert session.read_event() == KeyEvent("k")
    assert session.read_event() == KeyEvent("q")


def test_read_event_eof_raises(console):
    session = TerminalSession(console=console, stdin=FakeTTY(""))
    with pytest.raises(InputReadError):
        session.read_event()


def test_context_manager_restores(console, tty_mocks):
    with TerminalSession(console=console, stdin=FakeTTY()) as session:
        assert session.active
    assert not session.active
    tty_mocks["live"].stop.assert_called_once()


def test_context_manager_keeps_original_error(console, tty_mocks):
    tty_mocks["tcsetattr"].side_effect = termios.error("bad fd")
    with pytest.raises(RuntimeError, match="boom"):
        with TerminalSession(console=console, stdin=FakeTTY()):
            raise RuntimeError("boom")


def test_esc_is_a_noop_and_keeps_later_keys(console):
    session = TerminalSession(console=console, stdin=FakeTTY("\x1bkkq"))
    state = AppState.create()
    keys = []
    while not state.exit:
        event = session.read_event()
        keys.append(event.key)
        handle_event(event, state)
    assert keys == ["esc", "k", "k", "q"]
    assert [counter.value for counter in state.counters] == [2, 0, 0]


def test_initialize_reads_from_unbuffered_terminal_input(console, tty_mocks):
    session = TerminalSession(console=console, stdin=FakeTTY())
    session.initialize()
    with patch("os.read", side_effect=[b"k"]) as os_read:
        assert session.read_event() == KeyEvent("k")
    os_read.assert_called_once_with(7, 1)

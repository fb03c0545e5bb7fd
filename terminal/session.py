"""Terminal session: alternate screen, unbuffered key input, frame drawing."""

from __future__ import annotations

import os
import sys
from typing import Any, Callable, TextIO

from rich.console import Console
from rich.layout import Layout
from rich.live import Live

from common.errors import InputReadError, TerminalInitError, TerminalRestoreError
from common.logging_setup import get_logger
from terminal.keys import KeyEvent, TerminalInput, read_key_posix, read_key_windows

logger = get_logger(__name__)


class TerminalSession:
    """
    Owns the terminal for the lifetime of the application.

    ``initialize`` switches to the alternate screen with echo and line
    buffering off; ``restore`` undoes both and is safe to call more than
    once, so error paths can always attempt it.
    """

    def __init__(self, console: Console | None = None, stdin: TextIO | None = None) -> None:
        self.console = console or Console()
        self._stdin = stdin if stdin is not None else sys.stdin
        self._live: Live | None = None
        self._saved_attrs: Any = None
        self._fd: int | None = None
        self._input: TerminalInput | None = None

    @property
    def active(self) -> bool:
        return self._live is not None

    def initialize(self) -> None:
        if self.active:
            return
        try:
            is_tty = self._stdin.isatty()
        except (AttributeError, ValueError):
            is_tty = False
        if not is_tty:
            raise TerminalInitError("stdin is not a terminal")

        if os.name != "nt":
            self._enter_cbreak()

        live = Live(
            Layout(),
            console=self.console,
            screen=True,
            auto_refresh=False,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        try:
            live.start()
        except OSError as exc:
            self._restore_attrs()
            raise TerminalInitError(f"failed to enter alternate screen: {exc}") from exc
        self._live = live
        logger.info("Terminal session started")

    def _enter_cbreak(self) -> None:
        import termios
        import tty

        try:
            fd = self._stdin.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError, ValueError) as exc:
            self._saved_attrs = None
            raise TerminalInitError(f"failed to configure terminal: {exc}") from exc
        self._fd = fd
        self._input = TerminalInput(fd)

    def _restore_attrs(self) -> None:
        if self._fd is None or self._saved_attrs is None:
            return
        import termios

        fd, attrs = self._fd, self._saved_attrs
        self._fd = None
        self._input = None
        self._saved_attrs = None
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        except (termios.error, OSError) as exc:
            raise TerminalRestoreError(f"failed to restore terminal mode: {exc}") from exc

    def restore(self) -> None:
        live, self._live = self._live, None
        errors: list[str] = []
        if live is not None:
            try:
                live.stop()
            except OSError as exc:
                errors.append(f"failed to leave alternate screen: {exc}")
        try:
            self._restore_attrs()
        except TerminalRestoreError as exc:
            errors.append(str(exc))
        if errors:
            raise TerminalRestoreError("; ".join(errors))
        if live is not None:
            logger.info("Terminal session restored")

    def draw(self, render_fn: Callable[[Layout], None]) -> None:
        """Render one full frame and flush it before returning."""
        if self._live is None:
            raise TerminalInitError("terminal session is not initialized")
        frame = Layout(name="root")
        render_fn(frame)
        self._live.update(frame, refresh=True)

    def read_event(self) -> KeyEvent:
        """Block until the next key press."""
        while True:
            if os.name == "nt":
                try:
                    key = read_key_windows()
                except OSError as exc:
                    raise InputReadError(f"failed to read key: {exc}") from exc
            else:
                key = read_key_posix(self._input if self._input is not None else self._stdin)
            # Unmapped extended keys come back empty.
            if key:
                return KeyEvent(key)

    def __enter__(self) -> "TerminalSession":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.restore()
        except TerminalRestoreError:
            if exc is None:
                raise
            # Keep the error that is already propagating.
            logger.exception("Terminal restore failed while handling %s", exc_type.__name__)

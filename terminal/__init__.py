"""Terminal session lifecycle and keyboard input."""

from terminal.keys import KeyEvent, KeyEventKind
from terminal.session import TerminalSession

__all__ = ["KeyEvent", "KeyEventKind", "TerminalSession"]

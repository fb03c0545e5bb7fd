"""Blocking key readers for POSIX and Windows consoles."""

from __future__ import annotations

import codecs
import os
import select
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from common.errors import InputReadError


class KeyEventKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    kind: KeyEventKind = KeyEventKind.PRESS


_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}

# How long to wait for the rest of an escape sequence after ESC.
ESCAPE_TIMEOUT = 0.05


class TerminalInput:
    """
    Unbuffered text view of a terminal file descriptor.

    Reads one byte at a time, so nothing is held back in a Python buffer and
    ``select`` on the descriptor reflects exactly what is still pending.
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._pushed = ""

    def fileno(self) -> int:
        return self._fd

    def isatty(self) -> bool:
        return os.isatty(self._fd)

    def unread(self, text: str) -> None:
        self._pushed = text + self._pushed

    def read(self, size: int = 1) -> str:
        out, self._pushed = self._pushed[:size], self._pushed[size:]
        while len(out) < size:
            chunk = os.read(self._fd, 1)
            if not chunk:
                out += self._decoder.decode(b"", final=True)
                break
            out += self._decoder.decode(chunk)
        return out


def read_key_posix(stream: TextIO | None = None) -> str:
    """Read one key from a terminal in cbreak/raw mode and name it."""
    stream = stream if stream is not None else sys.stdin
    ch = _read(stream, 1)
    if ch == "\x1b":
        return _read_escape(stream)
    if ch in ("\r", "\n"):
        return "enter"
    if ch == "\x7f":
        return "backspace"
    if ch == "\t":
        return "tab"
    return ch


def _read_escape(stream: TextIO) -> str:
    # A lone ESC press has nothing queued behind it; never block for more.
    if not _has_pending_input(stream):
        return "esc"
    nxt = _read(stream, 1, allow_short=True)
    if nxt != "[":
        # Not a CSI sequence: leave that key for the next read.
        _push_back(stream, nxt)
        return "esc"
    if not _has_pending_input(stream):
        return "esc"
    return _ARROWS.get(_read(stream, 1, allow_short=True), "esc")


def _push_back(stream: TextIO, text: str) -> None:
    if not text:
        return
    unread = getattr(stream, "unread", None)
    if unread is not None:
        unread(text)
    elif stream.seekable():
        stream.seek(stream.tell() - len(text))


def _has_pending_input(stream: TextIO, timeout: float = ESCAPE_TIMEOUT) -> bool:
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        # In-memory streams: whatever follows is already there.
        return True
    try:
        readable, _, _ = select.select([fd], [], [], timeout)
    except (OSError, ValueError):
        return True
    return bool(readable)


def read_key_windows() -> str:
    import msvcrt

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        ch2 = msvcrt.getwch()
        mapping = {
            "H": "up",
            "P": "down",
            "K": "left",
            "M": "right",
        }
        return mapping.get(ch2, "")
    if ch == "\r":
        return "enter"
    if ch == "\x08":
        return "backspace"
    if ch == "\x1b":
        return "esc"
    if ch == "\t":
        return "tab"
    return ch


def _read(stream: TextIO, size: int, allow_short: bool = False) -> str:
    try:
        data = stream.read(size)
    except (OSError, ValueError) as exc:
        # ValueError covers undecodable input and closed streams.
        raise InputReadError(f"failed to read key: {exc}") from exc
    if not data and not allow_short:
        raise InputReadError("failed to read key: end of input")
    return data

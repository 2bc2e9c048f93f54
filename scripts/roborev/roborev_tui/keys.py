"""Terminal keyboard input: raw byte decoding and a polling reader thread."""

from __future__ import annotations

import logging
import os
import select
import threading
from typing import Callable

from roborev_tui.events import KeyPress

logger = logging.getLogger(__name__)

ESCAPE_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
}

CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\x03": "ctrl+c",
    "\x7f": "backspace",
    "\t": "tab",
}

UNKNOWN_KEY = "unknown"


def _is_final_byte(ch: str) -> bool:
    return "\x40" <= ch <= "\x7e"


def _sequence_end(data: str, start: int) -> int | None:
    """Index just past the escape sequence at ``start``, or None for a lone ESC."""
    if start + 1 >= len(data) or data[start + 1] not in "[O":
        return None
    if data[start + 1] == "O":
        return min(start + 3, len(data))
    i = start + 2
    while i < len(data):
        if _is_final_byte(data[i]):
            return i + 1
        i += 1
    # Truncated CSI; swallow what arrived rather than leak it as keys.
    return len(data)


def decode_keys(data: str) -> list[str]:
    """Split a chunk of terminal input into key names.

    ``ESC [`` and ``ESC O`` start an escape sequence that runs to its final
    byte (0x40-0x7E). Sequences we do not bind decode to ``UNKNOWN_KEY``, so
    PgUp or F5 never read as a bare ESC. Only an ESC that starts no sequence
    is the escape key itself.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            end = _sequence_end(data, i)
            if end is None:
                keys.append("esc")
                i += 1
                continue
            keys.append(ESCAPE_SEQUENCES.get(data[i:end], UNKNOWN_KEY))
            i = end
            continue
        keys.append(CONTROL_KEYS.get(ch, ch))
        i += 1
    return keys


def _poll_chunk(fd: int, timeout: float) -> str:
    """Read whatever is waiting on ``fd`` within ``timeout`` seconds."""
    ready, _, _ = select.select([fd], [], [], timeout)
    if not ready:
        return ""
    try:
        return os.read(fd, 64).decode("utf-8", errors="ignore")
    except OSError:
        return ""


class KeyReader:
    """Daemon thread turning stdin bytes into ``KeyPress`` events."""

    def __init__(self, fd: int, post: Callable[[KeyPress], None], poll_interval: float = 0.1):
        self.fd = fd
        self._post = post
        self.poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="roborev-keys", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def _run(self) -> None:
        while not self._stop.is_set():
            chunk = _poll_chunk(self.fd, self.poll_interval)
            if not chunk:
                continue
            for key in decode_keys(chunk):
                self._post(KeyPress(key=key))


class RawTerminal:
    """Context manager putting a tty in non-canonical, no-echo, no-signal mode.

    ISIG is cleared so Ctrl+C arrives as ``\\x03`` and goes through the state
    machine like any other key. Output processing is left intact so rich's
    alternate screen renders correctly, over SSH too. On a non-tty it is a
    no-op and ``enabled`` stays False.
    """

    def __init__(self, fd: int):
        self.fd = fd
        self.enabled = False
        self._saved = None

    def __enter__(self) -> "RawTerminal":
        try:
            import termios
        except ImportError:
            return self
        try:
            self._saved = termios.tcgetattr(self.fd)
            settings = termios.tcgetattr(self.fd)
            settings[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)
            settings[6][termios.VMIN] = 0
            settings[6][termios.VTIME] = 0
            termios.tcsetattr(self.fd, termios.TCSADRAIN, settings)
            self.enabled = True
        except termios.error as exc:
            logger.info("keyboard input disabled: %s", exc)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved is not None:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None

from __future__ import annotations

import asyncio
import logging
import os
import stat
import termios
import tty
from typing import Callable

logger = logging.getLogger(__name__)

_NAMED_KEYS = {
    "\x03": "ctrl+c",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def parse_keys(data: bytes) -> list[str]:
    keys: list[str] = []
    for ch in data.decode("utf-8", errors="replace"):
        if ch in _NAMED_KEYS:
            keys.append(_NAMED_KEYS[ch])
        elif 1 <= ord(ch) <= 26:
            keys.append(f"ctrl+{chr(ord(ch) + ord('a') - 1)}")
        else:
            keys.append(ch)
    return keys


class KeyReader:
    """Reads keystrokes from ``fd``, switching a TTY into cbreak mode meanwhile."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def __enter__(self) -> "KeyReader":
        if os.isatty(self.fd):
            self._saved = termios.tcgetattr(self.fd)
            # cbreak keeps ISIG, so ctrl+c still arrives as SIGINT
            tty.setcbreak(self.fd)
        return self

    def __exit__(self, *exc_info) -> None:
        self.detach()
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def attach(
        self, loop: asyncio.AbstractEventLoop, callback: Callable[[str], None]
    ) -> None:
        def on_readable() -> None:
            data = os.read(self.fd, 64)
            if not data:
                logger.debug("Input closed; keyboard input disabled")
                self.detach()
                return
            for key in parse_keys(data):
                callback(key)

        loop.add_reader(self.fd, on_readable)
        self._loop = loop

    def detach(self) -> None:
        if self._loop is not None:
            self._loop.remove_reader(self.fd)
            self._loop = None


def input_fd(stream) -> int | None:
    """Return a descriptor the event loop can watch, or None."""
    if stream is None:
        return None
    try:
        fd = stream.fileno()
        mode = os.fstat(fd).st_mode
    except (AttributeError, OSError, ValueError):
        return None
    # epoll refuses regular files and /dev/null
    if os.isatty(fd) or stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode):
        return fd
    logger.debug("Input fd %s is not a terminal, pipe or socket", fd)
    return None

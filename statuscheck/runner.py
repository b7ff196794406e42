from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from dataclasses import dataclass
from typing import Any, Protocol

from rich.console import Console
from rich.live import Live
from rich.text import Text

from statuscheck.models import KeyMsg, Msg
from statuscheck.state import QUIT, Cmd
from statuscheck.terminal import KeyReader, input_fd

logger = logging.getLogger(__name__)


class ProgramError(RuntimeError):
    pass


class Model(Protocol):
    def init(self) -> Cmd | None: ...

    def update(self, msg: Msg) -> Any: ...

    def view(self) -> str: ...


@dataclass(frozen=True)
class _CmdFailed:
    exc: BaseException


class Program:
    """
    Single-threaded display loop.

    Messages from keystrokes, SIGINT and finished commands go through one
    queue and are handed to ``model.update`` one at a time. The view is
    re-rendered after every message and the last frame is left on screen.
    """

    def __init__(
        self,
        model: Model,
        console: Console | None = None,
        input_stream=None,
        handle_signals: bool = True,
    ) -> None:
        self.model = model
        self.console = console or Console()
        self._input = sys.stdin if input_stream is None else input_stream
        self._handle_signals = handle_signals
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue | None = None
        self._tasks: set[asyncio.Task] = set()

    def run(self) -> Model:
        try:
            asyncio.run(self._run())
        except ProgramError:
            raise
        except Exception as exc:
            logger.exception("Display loop failed")
            raise ProgramError(f"{exc.__class__.__name__}: {exc}") from exc
        return self.model

    def send(self, msg: Msg) -> None:
        """Thread-safe: queue ``msg`` for the running loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Dropping %r, display loop is not running", msg)
            return
        loop.call_soon_threadsafe(self._queue.put_nowait, msg)

    async def _run(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        with contextlib.ExitStack() as stack:
            fd = input_fd(self._input)
            if fd is not None:
                reader = stack.enter_context(KeyReader(fd))
                reader.attach(self._loop, lambda key: self.send(KeyMsg(key)))
            else:
                logger.debug("No usable input stream, keyboard input disabled")

            if self._handle_signals:
                self._loop.add_signal_handler(signal.SIGINT, self.send, KeyMsg("ctrl+c"))
                stack.callback(self._loop.remove_signal_handler, signal.SIGINT)

            live = stack.enter_context(
                Live(
                    self._renderable(),
                    console=self.console,
                    auto_refresh=False,
                    transient=False,
                )
            )
            stack.callback(self._cancel_pending)

            self._dispatch(self.model.init())
            while True:
                msg = await self._queue.get()
                if isinstance(msg, _CmdFailed):
                    raise ProgramError(
                        f"{msg.exc.__class__.__name__}: {msg.exc}"
                    ) from msg.exc

                cmd = self.model.update(msg)
                live.update(self._renderable(), refresh=True)
                if cmd is QUIT:
                    logger.debug("Display loop stopping after %r", msg)
                    break
                self._dispatch(cmd)

    def _renderable(self) -> Text:
        return Text(self.model.view())

    def _dispatch(self, cmd: Cmd | None) -> None:
        if cmd is None:
            return
        task = asyncio.ensure_future(cmd())
        self._tasks.add(task)
        task.add_done_callback(self._on_cmd_done)

    def _on_cmd_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._queue.put_nowait(_CmdFailed(exc))
        elif task.result() is not None:
            self._queue.put_nowait(task.result())

    def _cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

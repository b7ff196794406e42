from __future__ import annotations

import logging
from typing import Awaitable, Callable

from statuscheck.checks.http_check import check
from statuscheck.formatting import render
from statuscheck.models import CheckState, ErrMsg, KeyMsg, Msg, StatusMsg

logger = logging.getLogger(__name__)

Cmd = Callable[[], Awaitable[Msg]]


class _Quit:
    def __repr__(self) -> str:
        return "QUIT"


QUIT = _Quit()

QUIT_KEYS = frozenset({"ctrl+c", "q"})


class CheckModel:
    """
    Drives a single check: launches it, records its outcome and renders.

    ``update`` returns the next command for the loop to run, ``QUIT`` when the
    loop should stop, or ``None`` when there is nothing to do.
    """

    def __init__(self, target: str, timeout_s: float | None = None) -> None:
        self.state = CheckState(target=target)
        self._timeout_s = timeout_s

    def init(self) -> Cmd:
        target, timeout_s = self.state.target, self._timeout_s

        async def run_check() -> Msg:
            return await check(target, timeout_s=timeout_s)

        return run_check

    def update(self, msg: Msg) -> Cmd | _Quit | None:
        if self.state.done:
            return QUIT

        if isinstance(msg, StatusMsg):
            self.state.status = msg.status
            return QUIT

        if isinstance(msg, ErrMsg):
            self.state.error = msg.error
            return QUIT

        if isinstance(msg, KeyMsg) and msg.key in QUIT_KEYS:
            logger.info("Quit requested with %r before the check finished", msg.key)
            return QUIT

        return None

    def view(self) -> str:
        return render(self.state)

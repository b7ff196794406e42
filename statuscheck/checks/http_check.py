from __future__ import annotations

import asyncio
import logging
import threading
import time

import requests

from statuscheck.checks.results import CheckResult
from statuscheck.config import settings
from statuscheck.models import ErrMsg, StatusMsg

logger = logging.getLogger(__name__)


def run_http(url: str, timeout_s: float) -> CheckResult:
    start = time.perf_counter()
    try:
        r = requests.get(url, timeout=(timeout_s, timeout_s), stream=True)
        r.close()  # body is never read
        latency_ms = int((time.perf_counter() - start) * 1000)
        ok = 200 <= r.status_code < 300
        return CheckResult(ok=ok, latency_ms=latency_ms, status_code=r.status_code)
    except requests.RequestException as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        return CheckResult(ok=False, latency_ms=latency_ms, error=str(e))


def _deliver(fut: asyncio.Future, value: CheckResult | BaseException) -> None:
    if fut.done():
        return
    if isinstance(value, BaseException):
        fut.set_exception(value)
    else:
        fut.set_result(value)


async def check(url: str, timeout_s: float | None = None) -> StatusMsg | ErrMsg:
    """
    Run a single GET against ``url`` without blocking the event loop.

    The request runs on a daemon thread so an abandoned check never holds up
    process exit. The loop stops waiting after ``timeout_s`` seconds even if
    the socket-level timeouts have not fired yet.
    """
    timeout_s = settings.TIMEOUT_SECONDS if timeout_s is None else timeout_s
    loop = asyncio.get_running_loop()
    fut: asyncio.Future = loop.create_future()

    def worker() -> None:
        try:
            value: CheckResult | BaseException = run_http(url, timeout_s)
        except Exception as exc:
            value = exc
        try:
            loop.call_soon_threadsafe(_deliver, fut, value)
        except RuntimeError:
            # Event loop already closed; nobody is waiting for this result.
            logger.debug("Discarding late result for %s", url)

    logger.info("Checking %s (timeout=%ss)", url, timeout_s)
    threading.Thread(target=worker, name="statuscheck-http", daemon=True).start()

    try:
        res = await asyncio.wait_for(fut, timeout_s)
    except asyncio.TimeoutError:
        logger.warning("Check of %s exceeded %ss", url, timeout_s)
        return ErrMsg(f"request to {url} timed out after {timeout_s:g}s")

    if res.error is not None:
        logger.info("Check of %s failed after %sms: %s", url, res.latency_ms, res.error)
        return ErrMsg(res.error)

    logger.info(
        "Check of %s returned %s in %sms (ok=%s)",
        url,
        res.status_code,
        res.latency_ms,
        res.ok,
    )
    return StatusMsg(res.status_code)

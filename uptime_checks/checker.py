from __future__ import annotations

import asyncio
import logging
import time

import httpx

from uptime_checks.config import DEFAULT_CHECK_TIMEOUT_SECONDS
from uptime_checks.status import Status


LOGGER = logging.getLogger("uptime-checks")


def classify_status_code(status_code: int) -> Status:
    return Status.UP if status_code < 400 else Status.DOWN


async def check_url(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout_seconds: float = DEFAULT_CHECK_TIMEOUT_SECONDS,
) -> Status:
    """
    One GET against url, bounded by timeout_seconds.

    Every failure (timeout, DNS, refused connection, bad URL, status >= 400)
    is reported as DOWN; nothing is raised to the caller.
    """
    started = time.perf_counter()
    try:
        # wait_for cancels the in-flight request at the deadline.
        resp = await asyncio.wait_for(
            client.get(url, follow_redirects=True, timeout=timeout_seconds),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        LOGGER.debug("Check timed out url=%s timeout_s=%s", url, timeout_seconds)
        return Status.DOWN
    except Exception as exc:
        LOGGER.debug("Check failed url=%s error=%s: %s", url, type(exc).__name__, exc)
        return Status.DOWN

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    status = classify_status_code(resp.status_code)
    LOGGER.debug(
        "Check response url=%s status_code=%s elapsed_ms=%s result=%s",
        url,
        resp.status_code,
        round(elapsed_ms, 3),
        status.value,
    )
    return status

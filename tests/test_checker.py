from __future__ import annotations

import time

import httpx
import pytest

from uptime_checks.checker import check_url, classify_status_code
from uptime_checks.status import Status


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (200, Status.UP),
        (204, Status.UP),
        (301, Status.UP),
        (399, Status.UP),
        (400, Status.DOWN),
        (404, Status.DOWN),
        (503, Status.DOWN),
    ],
)
def test_classify_status_code(status_code: int, expected: Status) -> None:
    assert classify_status_code(status_code) is expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/ok", Status.UP),
        ("/no-content", Status.UP),
        ("/redirect", Status.UP),
        ("/not-modified-ish", Status.UP),
        ("/unauthorized", Status.DOWN),
        ("/missing", Status.DOWN),
        ("/error", Status.DOWN),
        ("/bad_gateway", Status.DOWN),
    ],
)
async def test_check_url_against_local_server(local_server_base_url: str, path: str, expected: Status) -> None:
    async with httpx.AsyncClient() as client:
        status = await check_url(client, f"{local_server_base_url}{path}", timeout_seconds=5.0)
    assert status is expected


@pytest.mark.asyncio
async def test_check_url_timeout_is_down_and_bounded(local_server_base_url: str) -> None:
    started = time.perf_counter()
    async with httpx.AsyncClient() as client:
        status = await check_url(client, f"{local_server_base_url}/slow", timeout_seconds=0.3)
    elapsed = time.perf_counter() - started
    assert status is Status.DOWN
    assert elapsed < 1.5


@pytest.mark.asyncio
async def test_check_url_connection_refused_is_down(closed_port_url: str) -> None:
    async with httpx.AsyncClient() as client:
        status = await check_url(client, closed_port_url, timeout_seconds=2.0)
    assert status is Status.DOWN


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["not a url", "ftp://example.invalid/", ""])
async def test_check_url_invalid_url_is_down(url: str) -> None:
    async with httpx.AsyncClient() as client:
        status = await check_url(client, url, timeout_seconds=2.0)
    assert status is Status.DOWN


@pytest.mark.asyncio
async def test_check_url_client_can_be_reused_after_timeout(local_server_base_url: str) -> None:
    async with httpx.AsyncClient() as client:
        assert await check_url(client, f"{local_server_base_url}/slow", timeout_seconds=0.2) is Status.DOWN
        assert await check_url(client, f"{local_server_base_url}/ok", timeout_seconds=5.0) is Status.UP

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlsplit, urlunsplit

import httpx


LOGGER = logging.getLogger("uptime-checks")

WEBHOOK_TIMEOUT_SECONDS = 15.0


class NotificationError(RuntimeError):
    pass


class Notifier(Protocol):
    async def notify(self, message: str) -> None: ...


def redact_webhook_url(url: str) -> str:
    """
    Chat webhook URLs carry their key/token in the query string; keep it out of logs.
    """
    s = (url or "").strip()
    if not s:
        return s
    try:
        parts = urlsplit(s)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    except Exception:
        return "<redacted>"


@dataclass(frozen=True)
class WebhookConfig:
    url: str
    timeout_seconds: float = WEBHOOK_TIMEOUT_SECONDS


class WebhookNotifier:
    def __init__(self, client: httpx.AsyncClient, config: WebhookConfig) -> None:
        self._client = client
        self._config = config

    async def notify(self, message: str) -> None:
        payload = {"text": message}
        safe_url = redact_webhook_url(self._config.url)
        try:
            resp = await self._client.post(self._config.url, json=payload, timeout=self._config.timeout_seconds)
        except httpx.HTTPError as e:
            msg = f"{type(e).__name__}: {e}".replace(self._config.url, safe_url)
            raise NotificationError(f"webhook request failed url={safe_url} error={msg}") from None
        if not 200 <= resp.status_code < 300:
            raise NotificationError(f"webhook returned status_code={resp.status_code} url={safe_url}")


async def notify_best_effort(notifier: Notifier, message: str) -> bool:
    """
    Deliver one message; any failure is logged and swallowed.

    Returns True when the notifier reported success.
    """
    try:
        await notifier.notify(message)
    except Exception as exc:
        LOGGER.warning("Failed to send chat message error=%s", exc)
        return False
    return True

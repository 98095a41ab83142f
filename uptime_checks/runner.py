from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable

import httpx

from uptime_checks.checker import check_url
from uptime_checks.config import MonitorConfig, MonitorEntry, filter_entries, load_entries
from uptime_checks.notifier import Notifier, WebhookConfig, WebhookNotifier, notify_best_effort
from uptime_checks.policy import build_transition_message, decide, format_timestamp
from uptime_checks.status import Status
from uptime_checks.status_store import StatusStore


LOGGER = logging.getLogger("uptime-checks")

CheckFn = Callable[[str], Awaitable[Status]]


@dataclass
class PassSummary:
    interval: str
    matched: int = 0
    checked: int = 0
    notified: int = 0
    notify_failures: int = 0
    changed: bool = False


async def _observe(check: CheckFn, entry: MonitorEntry) -> Status:
    try:
        observed = await check(entry.url)
    except Exception as exc:
        LOGGER.exception("Check crashed url=%s error=%s", entry.url, exc)
        return Status.DOWN
    if not isinstance(observed, Status) or not observed.is_observation:
        LOGGER.warning("Check returned no observation url=%s result=%r; treating as down", entry.url, observed)
        return Status.DOWN
    return observed


async def run_pass(
    entries: list[MonitorEntry],
    *,
    store: StatusStore,
    interval: str,
    check: CheckFn,
    notifier: Notifier,
    now: Callable[[], datetime] | None = None,
) -> PassSummary:
    """
    Check every entry tagged with interval, once, in order.

    Statuses are loaded only when at least one entry matches and written back
    only when some entry's state changed.
    """
    summary = PassSummary(interval=interval)
    to_check = filter_entries(entries, interval)
    summary.matched = len(to_check)
    if not to_check:
        LOGGER.info("No URLs to check for interval %s", interval)
        return summary

    statuses = store.load()

    for entry in to_check:
        LOGGER.info(
            "Checking name=%s url=%s mode=%s at=%s",
            entry.display_name,
            entry.url,
            entry.mode.value,
            format_timestamp(now() if now else None),
        )
        observed = await _observe(check, entry)
        summary.checked += 1

        prev = statuses.get(entry.url, Status.UNKNOWN)
        decision = decide(prev, observed, entry.mode)

        if decision.notify:
            msg = build_transition_message(entry, decision.direction, prev, now=now() if now else None)
            LOGGER.info("Notify: %s", msg)
            if await notify_best_effort(notifier, msg):
                summary.notified += 1
            else:
                summary.notify_failures += 1
        elif prev is Status.UNKNOWN:
            LOGGER.info("Prev unknown for url=%s; recording %s (no notify)", entry.url, decision.next_state.value)
        elif prev is not decision.next_state:
            LOGGER.info(
                "State changed url=%s %s -> %s but mode=%s so no notify",
                entry.url,
                prev.value,
                decision.next_state.value,
                entry.mode.value,
            )
        else:
            LOGGER.info("No change for url=%s (%s)", entry.url, decision.next_state.value)

        if prev is not decision.next_state:
            statuses[entry.url] = decision.next_state
            summary.changed = True

    if summary.changed:
        store.save(statuses)
        LOGGER.info("Statuses updated path=%s", store.path)
    else:
        LOGGER.info("No status changes")
    return summary


async def run_monitor(config: MonitorConfig) -> PassSummary:
    entries = load_entries(config.urls_path)
    store = StatusStore(config.status_path)

    async with httpx.AsyncClient() as client:
        notifier = WebhookNotifier(client, WebhookConfig(url=config.webhook_url))

        async def check(url: str) -> Status:
            return await check_url(client, url, timeout_seconds=config.check_timeout_seconds)

        return await run_pass(
            entries,
            store=store,
            interval=config.interval,
            check=check,
            notifier=notifier,
        )

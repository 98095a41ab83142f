from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from uptime_checks.status import NotifyMode, Status

if TYPE_CHECKING:
    from uptime_checks.config import MonitorEntry


@dataclass(frozen=True)
class Decision:
    next_state: Status
    notify: bool
    direction: Status | None = None


def _mode_wants(mode: NotifyMode, observed: Status) -> bool:
    if mode is NotifyMode.BOTH:
        return True
    if mode is NotifyMode.DOWN:
        return observed is Status.DOWN
    return observed is Status.UP


def decide(prev: Status, observed: Status, mode: NotifyMode) -> Decision:
    """
    Decide the next persisted state for one entry and whether to notify.

    - prev UNKNOWN (first observation): record, never notify.
    - prev == observed: nothing to report.
    - otherwise a real transition: notify when the mode covers the new state.
    """
    if not observed.is_observation:
        raise ValueError("observed state must be up or down")

    if prev is Status.UNKNOWN or prev is observed:
        return Decision(next_state=observed, notify=False)

    if _mode_wants(NotifyMode(mode), observed):
        return Decision(next_state=observed, notify=True, direction=observed)
    return Decision(next_state=observed, notify=False)


def format_timestamp(now: datetime | None = None) -> str:
    dt = now or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_transition_message(
    entry: MonitorEntry,
    direction: Status,
    prev: Status,
    *,
    now: datetime | None = None,
) -> str:
    label = "DOWN" if direction is Status.DOWN else "UP"
    return f"{label}: {entry.display_name} ({entry.url}) at {format_timestamp(now)} (was {prev.value})"

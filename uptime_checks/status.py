from __future__ import annotations

from enum import Enum


class Status(str, Enum):
    # UNKNOWN is never persisted; on disk it is the absence of a key.
    UNKNOWN = "unknown"
    UP = "up"
    DOWN = "down"

    @property
    def is_observation(self) -> bool:
        return self is not Status.UNKNOWN


class NotifyMode(str, Enum):
    DOWN = "down"
    UP = "up"
    BOTH = "both"


DEFAULT_NOTIFY_MODE = NotifyMode.DOWN


def parse_notify_mode(value: object) -> NotifyMode | None:
    s = str(value or "").strip().lower()
    if not s:
        return DEFAULT_NOTIFY_MODE
    try:
        return NotifyMode(s)
    except ValueError:
        return None

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from uptime_checks.status import Status


LOGGER = logging.getLogger("uptime-checks")


def _coerce_status_dict(value: Any) -> dict[str, Status]:
    if not isinstance(value, dict):
        return {}
    state: dict[str, Status] = {}
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            continue
        if v == Status.UP.value:
            state[k] = Status.UP
        elif v == Status.DOWN.value:
            state[k] = Status.DOWN
    return state


class StatusStore:
    """Last-known up/down state per URL, kept as one JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Status]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except Exception as exc:
            LOGGER.warning("Failed to read status file path=%s error=%s", self.path, exc)
            return {}

        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring status file that is not a mapping path=%s", self.path)
            return {}
        return _coerce_status_dict(raw)

    def save(self, statuses: Mapping[str, Status]) -> None:
        # Plain overwrite: overlapping passes are not guarded, the last writer wins.
        payload = {url: Status(state).value for url, state in statuses.items() if Status(state).is_observation}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

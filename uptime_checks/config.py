from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from uptime_checks.status import DEFAULT_NOTIFY_MODE, NotifyMode, parse_notify_mode


LOGGER = logging.getLogger("uptime-checks")

DEFAULT_INTERVAL = "1m"
DEFAULT_URLS_FILE = "urls.json"
DEFAULT_STATUS_FILE = "statuses.json"
DEFAULT_CHECK_TIMEOUT_SECONDS = 10.0


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class MonitorEntry:
    url: str
    name: str | None = None
    interval: str = DEFAULT_INTERVAL
    mode: NotifyMode = DEFAULT_NOTIFY_MODE

    @property
    def display_name(self) -> str:
        return self.name or self.url


@dataclass(frozen=True)
class MonitorConfig:
    urls_path: Path
    status_path: Path
    webhook_url: str
    interval: str = DEFAULT_INTERVAL
    check_timeout_seconds: float = DEFAULT_CHECK_TIMEOUT_SECONDS


def _parse_entry(idx: int, raw: Any) -> MonitorEntry | None:
    if not isinstance(raw, dict):
        LOGGER.warning("Skipping entry idx=%s: expected a mapping, got %s", idx, type(raw).__name__)
        return None

    url = str(raw.get("url") or "").strip()
    if not url:
        LOGGER.warning("Skipping entry idx=%s: missing url", idx)
        return None

    name = str(raw.get("name") or "").strip() or None
    interval = str(raw.get("interval") or "").strip() or DEFAULT_INTERVAL

    mode = parse_notify_mode(raw.get("mode"))
    if mode is None:
        LOGGER.warning(
            "Unknown notify mode for url=%s mode=%r; using %s", url, raw.get("mode"), DEFAULT_NOTIFY_MODE.value
        )
        mode = DEFAULT_NOTIFY_MODE

    return MonitorEntry(url=url, name=name, interval=interval, mode=mode)


def _parse_document(path: Path, text: str) -> Any:
    # PyYAML rejects tab indentation, which is valid JSON; only .yaml/.yml go straight to YAML.
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return yaml.safe_load(text)


def load_entries(path: Path) -> list[MonitorEntry]:
    """
    Load the ordered entry list: JSON, or YAML for .yaml/.yml files and
    documents that are not valid JSON.

    A missing or unparsable file means "no entries"; the pass becomes a no-op.
    """
    try:
        data = _parse_document(Path(path), Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        LOGGER.warning("Entry list not found path=%s", path)
        return []
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        LOGGER.warning("Failed to read entry list path=%s error=%s", path, exc)
        return []

    if data is None:
        return []
    if not isinstance(data, list):
        LOGGER.warning("Entry list must be a sequence path=%s got=%s", path, type(data).__name__)
        return []

    entries: list[MonitorEntry] = []
    for idx, raw in enumerate(data):
        entry = _parse_entry(idx, raw)
        if entry is not None:
            entries.append(entry)
    return entries


def filter_entries(entries: list[MonitorEntry], interval: str) -> list[MonitorEntry]:
    return [e for e in entries if e.interval == interval]


def _pick(cli_value: Any, env: Mapping[str, str], env_name: str, default: Any = None) -> Any:
    if cli_value is not None and str(cli_value).strip():
        return cli_value
    env_value = env.get(env_name)
    if env_value is not None and env_value.strip():
        return env_value
    return default


def load_monitor_config(
    *,
    urls_file: str | None = None,
    status_file: str | None = None,
    interval: str | None = None,
    webhook_url: str | None = None,
    check_timeout_seconds: float | str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> MonitorConfig:
    """
    Build the validated startup configuration.

    Explicit arguments win over environment variables, which win over defaults.
    Raises ConfigError instead of exiting so callers decide how to fail.
    """
    env = os.environ if env is None else env
    base = Path.cwd() if cwd is None else Path(cwd)

    webhook = str(_pick(webhook_url, env, "GCHAT_WEBHOOK") or "").strip()
    if not webhook:
        raise ConfigError("GCHAT_WEBHOOK is not set")

    raw_timeout = _pick(check_timeout_seconds, env, "CHECK_TIMEOUT_SECONDS", DEFAULT_CHECK_TIMEOUT_SECONDS)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid check timeout {raw_timeout!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"Check timeout must be positive, got {timeout}")

    urls_path = Path(str(_pick(urls_file, env, "URLS_FILE", DEFAULT_URLS_FILE)))
    status_path = Path(str(_pick(status_file, env, "STATUS_FILE", DEFAULT_STATUS_FILE)))

    return MonitorConfig(
        urls_path=urls_path if urls_path.is_absolute() else base / urls_path,
        status_path=status_path if status_path.is_absolute() else base / status_path,
        webhook_url=webhook,
        interval=str(_pick(interval, env, "CHECK_INTERVAL", DEFAULT_INTERVAL)).strip(),
        check_timeout_seconds=timeout,
    )

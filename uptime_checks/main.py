from __future__ import annotations

import argparse
import asyncio
import logging
import os

from uptime_checks.config import ConfigError, load_monitor_config
from uptime_checks.runner import run_monitor


LOGGER = logging.getLogger("uptime-checks")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check configured URLs once and post status transitions to chat")
    parser.add_argument("--urls", default=None, help="Entry list (JSON/YAML); env URLS_FILE, default urls.json")
    parser.add_argument(
        "--statuses", default=None, help="Status file (JSON); env STATUS_FILE, default statuses.json"
    )
    parser.add_argument("--interval", default=None, help="Interval tag to process; env CHECK_INTERVAL, default 1m")
    parser.add_argument("--webhook", default=None, help="Chat webhook URL; env GCHAT_WEBHOOK (required)")
    parser.add_argument(
        "--timeout", default=None, help="Per-check timeout in seconds; env CHECK_TIMEOUT_SECONDS, default 10"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (INFO, WARNING, ...)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # The webhook credentials live in the request URL, which httpx logs at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    try:
        config = load_monitor_config(
            urls_file=args.urls,
            status_file=args.statuses,
            interval=args.interval,
            webhook_url=args.webhook,
            check_timeout_seconds=args.timeout,
        )
    except ConfigError as exc:
        LOGGER.error("%s. Exiting.", exc)
        return 1

    summary = asyncio.run(run_monitor(config))
    LOGGER.info(
        "Pass finished interval=%s matched=%s checked=%s notified=%s notify_failures=%s changed=%s",
        summary.interval,
        summary.matched,
        summary.checked,
        summary.notified,
        summary.notify_failures,
        summary.changed,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

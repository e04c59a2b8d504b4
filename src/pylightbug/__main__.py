"""Run the tracker poller.

Usage
-----
Set environment variables and run::

    export LIGHTBUG_EMAIL="you@example.com"
    export LIGHTBUG_PASSWORD="your-password"
    export SUPABASE_URL="https://<project>.supabase.co"
    export SUPABASE_SERVICE_KEY="..."
    python -m pylightbug

Options::

    --once               Run a single cycle and exit
    --interval SECONDS   Delay between cycles (default: LIGHTBUG_POLL_INTERVAL or 60)
    --dry-run            Keep rows in memory instead of writing to Supabase
    --serial SERIAL      Roster entry for --dry-run (repeatable)
    -v, --verbose        DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from pylightbug.client import LightbugClient
from pylightbug.config import LightbugConfig
from pylightbug.exceptions import LightbugConfigError, LightbugError
from pylightbug.identity import DeviceIdentityResolver
from pylightbug.ingestion.live import LiveDataFetcher
from pylightbug.poller import TrackerPoller
from pylightbug.sink.base import PersistenceSink
from pylightbug.sink.memory import MemorySink
from pylightbug.sink.supabase import SupabaseSink, build_supabase_transport

_logger = logging.getLogger("pylightbug")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pylightbug", description="Poll Lightbug trackers into Supabase.")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between cycles")
    parser.add_argument("--dry-run", action="store_true", help="Store rows in memory only")
    parser.add_argument(
        "--serial",
        action="append",
        default=[],
        dest="serials",
        help="Tracker serial for --dry-run (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_poller(
    client: LightbugClient,
    sink: PersistenceSink,
    *,
    interval: float,
) -> TrackerPoller:
    """Wire resolver, fetcher and sink into a poller."""
    resolver = DeviceIdentityResolver(client.get_device_list)
    fetcher = LiveDataFetcher(client, resolver)
    return TrackerPoller(fetcher, sink, interval=interval)


async def _run(config: LightbugConfig, args: argparse.Namespace) -> int:
    async with LightbugClient(config) as client:
        try:
            await client.login()
        except LightbugError as exc:
            _logger.error("Login failed: %s", exc)
            return 1

        sink: PersistenceSink
        if args.dry_run:
            sink = MemorySink(args.serials)
        else:
            sink = SupabaseSink.from_config(build_supabase_transport(client.http_session, config), config)

        poller = build_poller(client, sink, interval=config.poll_interval)
        await poller.run(max_cycles=1 if args.once else None)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["poll_interval"] = args.interval

    try:
        config = LightbugConfig.from_env(**overrides)
        config.validate(require_sink=not args.dry_run)
    except LightbugConfigError as exc:
        _logger.error("%s", exc)
        return 2

    try:
        return asyncio.run(_run(config, args))
    except KeyboardInterrupt:
        _logger.info("Interrupted; stopping poller")
        return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for uptimepy."""

import argparse
import asyncio
import json
import random
import signal
import sys
from collections.abc import Sequence
from datetime import datetime

from uptimepy.adapters.probe.http import HttpProber, build_target
from uptimepy.adapters.storage.json_files import JsonPartitionStore
from uptimepy.config import MonitorConfig, load_config
from uptimepy.core.encoding.records import encode_probe
from uptimepy.core.errors import UptimeError
from uptimepy.core.logs import configure_logging, get_logger
from uptimepy.core.timezones import TimeZoneResolver
from uptimepy.runtime.seed import generate_day

logger = get_logger(__name__)


def _serve(config: MonitorConfig, args: argparse.Namespace) -> int:
    import uvicorn

    from uptimepy.app import create_app

    app = create_app(config, collect=not args.no_collect)
    uvicorn.run(app, host=args.host, port=config.port, log_level=args.log_level.lower())
    return 0


async def _collect(config: MonitorConfig) -> None:
    from uptimepy.app import build_monitor

    monitor = build_monitor(config)
    loop = asyncio.get_running_loop()
    stopped = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stopped.set)
    task = monitor.collector.start()
    waiter = asyncio.ensure_future(stopped.wait())
    try:
        await asyncio.wait([task, waiter], return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        await monitor.collector.stop()
        await monitor.prober.aclose()


async def _check(config: MonitorConfig) -> int:
    prober = HttpProber(timeout_ms=config.probe_timeout_ms)
    try:
        result = await prober.probe(build_target(config.target_url, config.health_path))
    finally:
        await prober.aclose()
    print(json.dumps(encode_probe(result), indent=2))
    return 0 if result.success else 1


async def _seed(config: MonitorConfig, args: argparse.Namespace) -> int:
    day = datetime.strptime(args.date, "%Y-%m-%d").date()
    resolver = TimeZoneResolver(config.timezone_name)
    store = JsonPartitionStore(config.log_directory, resolver)

    records = generate_day(day, resolver, args.interval_seconds, random.Random(args.seed))
    await store.extend(args.date, records)
    print(f"Generated {len(records)} log entries for {args.date}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="uptimepy", description="HTTP uptime monitor")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the collector and the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--no-collect", action="store_true", help="Serve logs only")

    sub.add_parser("collect", help="Run only the collector loop")
    sub.add_parser("check", help="Probe the target once and print the result")

    seed = sub.add_parser("seed", help="Write a synthetic day of probe records")
    seed.add_argument("--date", required=True, help="Local date, YYYY-MM-DD")
    seed.add_argument("--interval-seconds", type=float, default=30.0)
    seed.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        config = load_config()
        if args.command == "serve":
            return _serve(config, args)
        if args.command == "collect":
            asyncio.run(_collect(config))
            return 0
        if args.command == "check":
            return asyncio.run(_check(config))
        return asyncio.run(_seed(config, args))
    except UptimeError as exc:
        logger.error("%s", exc)
        return 2
    except ValueError as exc:
        print(f"uptimepy: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

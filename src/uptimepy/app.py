"""FastAPI application wiring the collector and read endpoints together."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from uptimepy.adapters.frameworks.fastapi import create_monitor_router
from uptimepy.adapters.probe.http import HttpProber, build_target
from uptimepy.adapters.storage.json_files import JsonPartitionStore
from uptimepy.config import MonitorConfig
from uptimepy.core.logs import get_logger
from uptimepy.core.timezones import TimeZoneResolver
from uptimepy.runtime.collector import Collector
from uptimepy.service import MonitorService

logger = get_logger(__name__)


@dataclass
class Monitor:
    """The assembled components for one monitored target."""

    config: MonitorConfig
    resolver: TimeZoneResolver
    store: JsonPartitionStore
    prober: HttpProber
    collector: Collector
    service: MonitorService


def build_monitor(config: MonitorConfig) -> Monitor:
    """Assemble resolver, store, prober, collector and service from config."""
    resolver = TimeZoneResolver(config.timezone_name)
    store = JsonPartitionStore(config.log_directory, resolver)
    prober = HttpProber(timeout_ms=config.probe_timeout_ms)
    collector = Collector(
        prober=prober,
        store=store,
        target=build_target(config.target_url, config.health_path),
        interval_seconds=config.check_interval_seconds,
        resolver=resolver,
    )
    service = MonitorService(store, resolver, max_partitions=config.max_partitions)
    return Monitor(config, resolver, store, prober, collector, service)


def create_app(config: MonitorConfig, collect: bool = True) -> FastAPI:
    """Create the monitor's FastAPI application.

    Args:
        config: Process configuration.
        collect: Start the collector with the app's lifespan.

    Returns:
        Configured FastAPI application instance
    """
    monitor = build_monitor(config)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Run the collector for the lifetime of the server."""
        if collect:
            monitor.collector.start()
        try:
            yield
        finally:
            await monitor.collector.stop()
            await monitor.prober.aclose()

    app = FastAPI(title="uptimepy", lifespan=lifespan)
    app.state.monitor = monitor
    app.include_router(create_monitor_router(monitor.service))
    logger.info(
        "Monitoring %s in zone %s, logs in %s",
        monitor.collector.target,
        monitor.resolver.zone_name,
        config.log_directory,
    )
    return app

"""uptimepy - HTTP uptime monitor with day-partitioned probe logs."""

from uptimepy.adapters.probe.http import HttpProber
from uptimepy.adapters.storage.in_memory import InMemoryLogStore
from uptimepy.adapters.storage.json_files import JsonPartitionStore
from uptimepy.core.aggregate import aggregate
from uptimepy.core.errors import (
    ConfigError,
    CorruptPartitionError,
    InvalidTimezone,
    StoreIOError,
    UptimeError,
)
from uptimepy.core.logs import get_logger
from uptimepy.core.models import (
    AggregatedView,
    CorruptPartition,
    DaySummary,
    LoadResult,
    LogRecord,
    Partition,
    ProbeResult,
    WallClock,
)
from uptimepy.core.timezones import TimeZoneResolver, local_date_key, local_wall_clock
from uptimepy.runtime.collector import Collector

__all__ = [
    "AggregatedView",
    "Collector",
    "ConfigError",
    "CorruptPartition",
    "CorruptPartitionError",
    "DaySummary",
    "HttpProber",
    "InMemoryLogStore",
    "InvalidTimezone",
    "JsonPartitionStore",
    "LoadResult",
    "LogRecord",
    "Partition",
    "ProbeResult",
    "StoreIOError",
    "TimeZoneResolver",
    "UptimeError",
    "WallClock",
    "aggregate",
    "get_logger",
    "local_date_key",
    "local_wall_clock",
]

"""Core domain models for uptime data."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single probe against the monitored endpoint.

    Attributes:
        instant: Timezone-aware UTC time the probe was dispatched.
        success: True when the endpoint answered with a 2xx status.
        latency_ms: Elapsed wall-clock time of the network call in milliseconds.
        status_code: HTTP status code, or None when no response arrived.
        error: Short description of a transport failure, if any.
    """

    instant: datetime
    success: bool
    latency_ms: int
    status_code: int | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.latency_ms < 0:
            raise ValueError("latency_ms must be non-negative")


@dataclass(frozen=True)
class LogRecord:
    """The persisted form of a probe result.

    Attributes:
        recorded_at: UTC time the record was written. Authoritative for bucketing.
        timezone_label: Zone configured at write time. Provenance only.
        probe: The probe outcome.
    """

    recorded_at: datetime
    timezone_label: str
    probe: ProbeResult


@dataclass(frozen=True)
class Partition:
    """A date-named file holding an append-ordered sequence of records."""

    name: str
    records: tuple[LogRecord, ...] = ()


@dataclass(frozen=True)
class WallClock:
    """Local wall-clock fields for an instant in a given zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


@dataclass(frozen=True)
class CorruptPartition:
    """A partition that could not be parsed during a load.

    Attributes:
        name: Partition name (``YYYY-MM-DD``).
        path: Filesystem path of the partition file.
        reason: Human-readable parse failure.
    """

    name: str
    path: str
    reason: str


@dataclass(frozen=True)
class LoadResult:
    """Partitions loaded by a store, newest first, plus any skipped ones."""

    partitions: tuple[Partition, ...] = ()
    corrupt: tuple[CorruptPartition, ...] = ()


@dataclass(frozen=True)
class HourSlot:
    """Probe counts for one local hour of a day."""

    up: int
    down: int
    avg_latency_ms: int


@dataclass(frozen=True)
class DaySummary:
    """Uptime statistics for a single local calendar day.

    Attributes:
        date: Local date key (``YYYY-MM-DD``).
        up: Number of successful probes.
        down: Number of failed probes.
        total: Number of probes.
        uptime_percent: Share of successful probes, rounded to one decimal.
        hourly: 24 slots indexed by local hour; None where no probe ran.
    """

    date: str
    up: int
    down: int
    total: int
    uptime_percent: float
    hourly: tuple[HourSlot | None, ...] = field(default_factory=lambda: (None,) * 24)


# Local date key -> records ordered by recorded_at ascending.
AggregatedView = dict[str, list[LogRecord]]

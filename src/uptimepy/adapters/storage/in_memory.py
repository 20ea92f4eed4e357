"""In-memory storage adapter for log records."""

from collections.abc import Callable
from datetime import datetime, timezone

from uptimepy.core.models import LoadResult, LogRecord, Partition
from uptimepy.core.timezones import TimeZoneResolver


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryLogStore:
    """In-memory implementation of LogStorePort.

    Keeps partitions in a dict keyed by local date. Suitable for testing
    and embedding where persistence is not required.
    """

    def __init__(
        self,
        resolver: TimeZoneResolver | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._resolver = resolver or TimeZoneResolver("UTC")
        self._clock = clock
        self._partitions: dict[str, list[LogRecord]] = {}

    async def append(self, record: LogRecord) -> None:
        """Append a record to today's partition."""
        name = self._resolver.date_key(self._clock())
        self._partitions.setdefault(name, []).append(record)

    async def load_recent(self, max_partitions: int) -> LoadResult:
        """Return up to ``max_partitions`` partitions, newest first."""
        if max_partitions <= 0:
            return LoadResult()
        names = sorted(self._partitions, reverse=True)[:max_partitions]
        return LoadResult(
            partitions=tuple(
                Partition(name=name, records=tuple(self._partitions[name]))
                for name in names
            )
        )

    def count(self) -> int:
        """Return total number of records across partitions."""
        return sum(len(records) for records in self._partitions.values())

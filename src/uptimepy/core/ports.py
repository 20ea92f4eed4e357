"""Port interfaces for probing and log storage.

These protocols define the contracts that adapters must implement.
The collector and query service depend only on these interfaces, not
on concrete implementations.
"""

from typing import Protocol, runtime_checkable

from uptimepy.core.models import LoadResult, LogRecord, ProbeResult


@runtime_checkable
class ProberPort(Protocol):
    """Port for single-shot probes.

    Adapters must never raise for transport failures; a timeout, refused
    connection or non-2xx response is returned as ``success=False``.
    Examples: HttpProber.
    """

    async def probe(self, target: str) -> ProbeResult:
        """Probe the target once and return the outcome."""
        ...


@runtime_checkable
class LogStorePort(Protocol):
    """Port for day-partitioned log storage.

    Examples: JsonPartitionStore, InMemoryLogStore.
    """

    async def append(self, record: LogRecord) -> None:
        """Append a record to today's partition.

        Raises:
            StoreIOError: If the partition cannot be read or written.
        """
        ...

    async def load_recent(self, max_partitions: int) -> LoadResult:
        """Load the most recent partitions, newest first.

        Args:
            max_partitions: Maximum number of partitions to load.

        Returns:
            LoadResult with parsed partitions and any corrupt ones skipped.
        """
        ...

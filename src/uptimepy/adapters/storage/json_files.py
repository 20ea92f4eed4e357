"""JSON file storage adapter with one partition file per local date.

Each partition is ``<log_dir>/YYYY-MM-DD.json`` holding a JSON array of
records in append order. Appends are read-modify-write cycles guarded by an
exclusive section per partition: an ``asyncio.Lock`` for callers in this
process and an ``fcntl.flock`` on a sidecar ``.lock`` file for other
processes. New contents are written to a temporary file and swapped in with
``os.replace``, so a failed write leaves the previous file untouched.

The sidecar lock files stay on disk, one per partition ever appended to.
Deleting one while another process may hold it would break the exclusion.
"""

import asyncio
import fcntl
import json
import os
import re
import tempfile
from collections.abc import AsyncIterator, Callable, Iterator, Sequence
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from uptimepy.core.encoding.records import decode_records, encode_record
from uptimepy.core.errors import CorruptPartitionError, StoreIOError
from uptimepy.core.logs import get_logger
from uptimepy.core.models import CorruptPartition, LoadResult, LogRecord, Partition
from uptimepy.core.timezones import TimeZoneResolver

logger = get_logger(__name__)

PARTITION_SUFFIX = ".json"
LOCK_SUFFIX = ".lock"
# Fixed-width names keep lexical and chronological order identical.
_PARTITION_NAME = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_partition_name(name: str) -> bool:
    """Return True if ``name`` is a zero-padded ``YYYY-MM-DD`` date."""
    if not _PARTITION_NAME.match(name):
        return False
    try:
        datetime.strptime(name, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def _write_atomic(path: Path, payload: list[Any]) -> None:
    """Write ``payload`` to ``path`` through a temporary file and rename."""
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            json.dump(payload, tmp, ensure_ascii=False, indent=2)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass


class JsonPartitionStore:
    """File-backed implementation of LogStorePort.

    The partition an append goes to is the local date of the append time in
    the resolver's zone, fixed when the append starts. Partition names are
    never rewritten afterwards, so a file may hold records whose local date
    differs from its name; readers regroup by record content.

    Args:
        log_dir: Directory holding partition files. Created on first append.
        resolver: Resolver for the configured zone.
        clock: Source of the current UTC instant.
    """

    def __init__(
        self,
        log_dir: str | Path,
        resolver: TimeZoneResolver,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._log_dir = Path(log_dir)
        self._resolver = resolver
        self._clock = clock
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def partition_path(self, name: str) -> Path:
        """Return the file path of the partition ``name``."""
        if not is_partition_name(name):
            raise ValueError(f"Invalid partition name: {name!r}")
        return self._log_dir / f"{name}{PARTITION_SUFFIX}"

    def current_partition(self) -> str:
        """Return the name of today's partition in the configured zone."""
        return self._resolver.date_key(self._clock())

    def _get_lock(self, name: str) -> asyncio.Lock:
        """Get or create the in-process lock for a partition."""
        lock = self._locks.get(name)
        if lock is None:
            lock = self._locks[name] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def _partition_lock(self, name: str) -> AsyncIterator[None]:
        """Hold the in-process lock for a partition.

        The lock is dropped once no caller holds or waits for it, so only
        partitions with appends in progress keep an entry.
        """
        lock = self._get_lock(name)
        self._lock_users[name] = self._lock_users.get(name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[name] -= 1
            if not self._lock_users[name]:
                del self._lock_users[name]
                del self._locks[name]

    @contextmanager
    def _file_lock(self, name: str) -> Iterator[None]:
        """Hold an exclusive flock on the partition's sidecar lock file."""
        lock_path = self._log_dir / f"{name}{PARTITION_SUFFIX}{LOCK_SUFFIX}"
        with open(lock_path, "a") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

    async def append(self, record: LogRecord) -> None:
        """Append a record to today's partition.

        Raises:
            StoreIOError: If the partition cannot be read, is corrupt, or
                cannot be written. The file on disk is left as it was.
        """
        await self.extend(self.current_partition(), [record])

    async def extend(self, name: str, records: Sequence[LogRecord]) -> None:
        """Append several records to the named partition in one write.

        Raises:
            StoreIOError: See :meth:`append`.
        """
        path = self.partition_path(name)
        async with self._partition_lock(name):
            await asyncio.to_thread(self._extend_sync, name, path, records)

    def _extend_sync(self, name: str, path: Path, records: Sequence[LogRecord]) -> None:
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            with self._file_lock(name):
                existing = self._read_raw(path)
                existing.extend(encode_record(record) for record in records)
                _write_atomic(path, existing)
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreIOError(f"Cannot write partition {path}: {exc}") from exc

    def _read_raw(self, path: Path) -> list[Any]:
        """Read a partition's JSON array, or an empty list if it is absent."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        if not text.strip():
            return []
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreIOError(
                f"Refusing to append to corrupt partition {path}: {exc}"
            ) from exc
        if not isinstance(payload, list):
            raise StoreIOError(f"Refusing to append to corrupt partition {path}")
        return payload

    def list_partitions(self) -> list[str]:
        """Return all partition names, newest first."""
        if not self._log_dir.is_dir():
            return []
        names = [
            p.name[: -len(PARTITION_SUFFIX)]
            for p in self._log_dir.iterdir()
            if p.name.endswith(PARTITION_SUFFIX) and p.is_file()
        ]
        return sorted((n for n in names if is_partition_name(n)), reverse=True)

    async def load_recent(self, max_partitions: int) -> LoadResult:
        """Load up to ``max_partitions`` newest partitions.

        Corrupt files are skipped, logged, and reported in
        ``LoadResult.corrupt``; the remaining partitions still load.

        Raises:
            StoreIOError: If the log directory cannot be listed.
        """
        return await asyncio.to_thread(self._load_recent_sync, max_partitions)

    def _load_recent_sync(self, max_partitions: int) -> LoadResult:
        if max_partitions <= 0:
            return LoadResult()
        try:
            names = self.list_partitions()[:max_partitions]
        except OSError as exc:
            raise StoreIOError(f"Cannot list {self._log_dir}: {exc}") from exc

        partitions: list[Partition] = []
        corrupt: list[CorruptPartition] = []
        for name in names:
            path = self.partition_path(name)
            try:
                partitions.append(self._load_partition(name, path))
            except (CorruptPartitionError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping corrupt partition %s: %s", path, exc)
                corrupt.append(CorruptPartition(name=name, path=str(path), reason=str(exc)))
        return LoadResult(partitions=tuple(partitions), corrupt=tuple(corrupt))

    def _load_partition(self, name: str, path: Path) -> Partition:
        text = path.read_text(encoding="utf-8")
        try:
            payload = json.loads(text) if text.strip() else []
        except json.JSONDecodeError as exc:
            raise CorruptPartitionError(f"invalid JSON: {exc}") from exc
        return Partition(name=name, records=tuple(decode_records(payload)))

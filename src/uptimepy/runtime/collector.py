"""Periodic collector that probes the target and appends results.

The collector runs one loop per target. Ticks are strictly sequential: a
tick whose deadline arrives while the previous probe is still in flight is
skipped, and the schedule resumes on the fixed interval grid.
"""

import asyncio
import math
import time
from collections.abc import Callable
from datetime import datetime, timezone

from uptimepy.core.errors import StoreIOError
from uptimepy.core.logs import get_logger, log_exception
from uptimepy.core.models import LogRecord
from uptimepy.core.ports import LogStorePort, ProberPort
from uptimepy.core.timezones import TimeZoneResolver

logger = get_logger(__name__)

IDLE = "idle"
PROBING = "probing"

_STOP_GRACE_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Collector:
    """Fixed-interval scheduler for a single target.

    Example:
        ```python
        collector = Collector(prober, store, target, 30.0, resolver)
        collector.start()
        ...
        await collector.stop()
        ```

    Args:
        prober: Adapter implementing ProberPort.
        store: Adapter implementing LogStorePort.
        target: URL to probe.
        interval_seconds: Period between tick deadlines.
        resolver: Resolver for the configured zone; its name labels records.
        clock: Source of the UTC instant stamped on records.
        monotonic: Clock used for the tick schedule.
    """

    def __init__(
        self,
        prober: ProberPort,
        store: LogStorePort,
        target: str,
        interval_seconds: float,
        resolver: TimeZoneResolver,
        clock: Callable[[], datetime] = _utcnow,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.prober = prober
        self.store = store
        self.target = target
        self.interval_seconds = interval_seconds
        self.resolver = resolver
        self._clock = clock
        self._monotonic = monotonic
        self.state = IDLE
        self.ticks = 0
        self.skipped_ticks = 0
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> LogRecord | None:
        """Probe once and append the result.

        Returns:
            The appended record, or None if the append failed.
        """
        if self.state != IDLE:
            raise RuntimeError("tick already in progress")
        self.state = PROBING
        try:
            result = await self.prober.probe(self.target)
            record = LogRecord(
                recorded_at=self._clock(),
                timezone_label=self.resolver.zone_name,
                probe=result,
            )
            if result.success:
                logger.info(
                    "Probe of %s succeeded in %d ms (status %s)",
                    self.target,
                    result.latency_ms,
                    result.status_code,
                )
            else:
                logger.warning(
                    "Probe of %s failed after %d ms (status %s, error %s)",
                    self.target,
                    result.latency_ms,
                    result.status_code,
                    result.error,
                )
            try:
                await self._append(record)
            except StoreIOError as exc:
                logger.error("Dropping probe result, append failed: %s", exc)
                return None
            return record
        finally:
            self.ticks += 1
            self.state = IDLE

    async def _append(self, record: LogRecord) -> None:
        # A cancelled tick still finishes its write before cancellation propagates.
        write = asyncio.ensure_future(self.store.append(record))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            await asyncio.wait([write])
            if not write.cancelled() and write.exception() is not None:
                logger.error(
                    "Dropping probe result, append failed: %s", write.exception()
                )
            raise

    async def run(self) -> None:
        """Tick on a fixed grid until :meth:`stop` is called."""
        stop_event = self._get_stop_event()
        start = self._monotonic()
        index = 0
        logger.info(
            "Collector started for %s every %.3f s", self.target, self.interval_seconds
        )
        while not stop_event.is_set():
            try:
                await self.tick()
            except Exception:
                log_exception("Unexpected error during collector tick", logger)
            index += 1
            due = math.floor((self._monotonic() - start) / self.interval_seconds)
            if due >= index:
                missed = due - index + 1
                self.skipped_ticks += missed
                logger.warning(
                    "Probe overran its interval, skipping %d tick(s)", missed
                )
                index = due + 1
            delay = start + index * self.interval_seconds - self._monotonic()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=max(delay, 0.0))
            except asyncio.TimeoutError:
                pass
        logger.info("Collector stopped after %d tick(s)", self.ticks)

    def _get_stop_event(self) -> asyncio.Event:
        """Get or create the stop event (lazy to avoid event loop issues)."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        return self._stop_event

    def start(self) -> "asyncio.Task[None]":
        """Start the loop as a background task on the running event loop."""
        if self.running:
            raise RuntimeError("collector already running")
        self._get_stop_event().clear()
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self, timeout: float | None = None) -> None:
        """Stop the loop, letting an in-flight probe finish within its bound.

        Args:
            timeout: Seconds to wait for the current tick. Defaults to the
                prober's own timeout plus a short grace period. When it
                expires the task is cancelled; any write already started
                still completes.
        """
        self._get_stop_event().set()
        task = self._task
        if task is None or task.done():
            return
        if timeout is None:
            timeout = getattr(self.prober, "timeout_ms", 5000) / 1000 + _STOP_GRACE_SECONDS
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("In-flight probe exceeded %.1f s, abandoning it", timeout)
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

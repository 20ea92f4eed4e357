"""Shared test doubles for uptimepy tests."""

import asyncio
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from uptimepy.core.models import LogRecord, ProbeResult


def utc(*args: int) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


def make_record(
    recorded_at: datetime,
    success: bool = True,
    latency_ms: int = 10,
    status_code: int | None = 200,
    timezone_label: str = "UTC",
) -> LogRecord:
    """Build a LogRecord whose probe ran at ``recorded_at``."""
    return LogRecord(
        recorded_at=recorded_at,
        timezone_label=timezone_label,
        probe=ProbeResult(
            instant=recorded_at,
            success=success,
            latency_ms=latency_ms,
            status_code=status_code,
        ),
    )


class MutableClock:
    """Callable UTC clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedProber:
    """ProberPort double returning scripted latencies.

    Each probe returns the next latency from ``latencies`` (cycling once
    exhausted) and counts how many probes were in flight at once.
    """

    def __init__(
        self,
        latencies: Sequence[int] = (10,),
        success: bool = True,
        delay_seconds: float = 0.0,
        clock: MutableClock | None = None,
    ) -> None:
        self.latencies = list(latencies)
        self.success = success
        self.delay_seconds = delay_seconds
        self.clock = clock
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.timeout_ms = 5000

    async def probe(self, target: str) -> ProbeResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            instant = self.clock() if self.clock else datetime.now(timezone.utc)
            if self.delay_seconds:
                await asyncio.sleep(self.delay_seconds)
            latency = self.latencies[self.calls % len(self.latencies)]
            self.calls += 1
            return ProbeResult(
                instant=instant,
                success=self.success,
                latency_ms=latency,
                status_code=200 if self.success else 503,
            )
        finally:
            self.in_flight -= 1

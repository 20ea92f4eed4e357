"""Synthetic probe history for demos and dashboard development."""

import random
from datetime import date, datetime, timedelta, timezone

from uptimepy.core.models import LogRecord, ProbeResult
from uptimepy.core.timezones import TimeZoneResolver

MIN_LATENCY_MS = 4
MAX_LATENCY_MS = 69


def generate_day(
    day: date,
    resolver: TimeZoneResolver,
    interval_seconds: float = 30.0,
    rng: random.Random | None = None,
) -> list[LogRecord]:
    """Generate successful probe records covering one local day.

    Records run from local midnight up to, but excluding, the next local
    midnight in the resolver's zone, so DST days yield 23 or 25 hours.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")
    rng = rng or random.Random()
    start = datetime(day.year, day.month, day.day, tzinfo=resolver.zone)
    following = day + timedelta(days=1)
    end = datetime(following.year, following.month, following.day, tzinfo=resolver.zone)
    start_utc = start.astimezone(timezone.utc)
    end_utc = end.astimezone(timezone.utc)

    step = timedelta(seconds=interval_seconds)
    records: list[LogRecord] = []
    instant = start_utc
    while instant < end_utc:
        records.append(
            LogRecord(
                recorded_at=instant,
                timezone_label=resolver.zone_name,
                probe=ProbeResult(
                    instant=instant,
                    success=True,
                    latency_ms=rng.randint(MIN_LATENCY_MS, MAX_LATENCY_MS),
                    status_code=200,
                ),
            )
        )
        instant += step
    return records

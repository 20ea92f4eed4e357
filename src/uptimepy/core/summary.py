"""Per-day uptime statistics computed from an aggregated view."""

from collections.abc import Sequence
from typing import Any

from uptimepy.core.models import AggregatedView, DaySummary, HourSlot, LogRecord
from uptimepy.core.timezones import TimeZoneResolver, as_resolver


def summarize_day(
    date_key: str, records: Sequence[LogRecord], zone: TimeZoneResolver | str
) -> DaySummary:
    """Count up/down probes for a day and split them into local hours.

    Args:
        date_key: The local date the records belong to.
        records: Records already bucketed under ``date_key``.
        zone: Zone used to find each record's local hour.
    """
    resolver = as_resolver(zone)
    up = sum(1 for r in records if r.probe.success)
    total = len(records)

    per_hour: list[list[LogRecord]] = [[] for _ in range(24)]
    for record in records:
        per_hour[resolver.wall_clock(record.recorded_at).hour].append(record)

    hourly: list[HourSlot | None] = []
    for bucket in per_hour:
        if not bucket:
            hourly.append(None)
            continue
        hour_up = sum(1 for r in bucket if r.probe.success)
        hourly.append(
            HourSlot(
                up=hour_up,
                down=len(bucket) - hour_up,
                avg_latency_ms=round(sum(r.probe.latency_ms for r in bucket) / len(bucket)),
            )
        )

    return DaySummary(
        date=date_key,
        up=up,
        down=total - up,
        total=total,
        uptime_percent=round(up / total * 100, 1) if total else 0.0,
        hourly=tuple(hourly),
    )


def summarize_view(
    view: AggregatedView, zone: TimeZoneResolver | str
) -> dict[str, DaySummary]:
    """Summarize every day of an aggregated view, keeping its key order."""
    resolver = as_resolver(zone)
    return {key: summarize_day(key, records, resolver) for key, records in view.items()}


def encode_summary(summary: DaySummary) -> dict[str, Any]:
    return {
        "date": summary.date,
        "up": summary.up,
        "down": summary.down,
        "total": summary.total,
        "uptimePercent": summary.uptime_percent,
        "hourly": [
            None
            if slot is None
            else {"up": slot.up, "down": slot.down, "avgResponseTimeMs": slot.avg_latency_ms}
            for slot in summary.hourly
        ],
    }

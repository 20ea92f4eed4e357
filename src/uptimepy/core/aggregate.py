"""Regroup loaded partitions into local calendar days."""

from collections.abc import Iterable

from uptimepy.core.models import AggregatedView, LogRecord, Partition
from uptimepy.core.timezones import TimeZoneResolver, as_resolver


def aggregate(
    partitions: Iterable[Partition], zone: TimeZoneResolver | str
) -> AggregatedView:
    """Group every record by its own local date in the configured zone.

    The partition a record was loaded from is ignored: a record written just
    after local midnight into the previous day's file lands in the next day's
    bucket. The record's stored ``timezone_label`` is ignored as well.

    Args:
        partitions: Loaded partitions, in any order.
        zone: The currently configured zone, as a resolver or a zone name.
            Unknown names fall back to UTC.

    Returns:
        Mapping of date key to records sorted by ``recorded_at`` ascending,
        keys ordered newest first. Dates without records are absent.
    """
    resolver = as_resolver(zone)
    buckets: dict[str, list[LogRecord]] = {}
    for partition in partitions:
        for record in partition.records:
            key = resolver.date_key(record.recorded_at)
            buckets.setdefault(key, []).append(record)

    view: AggregatedView = {}
    for key in sorted(buckets, reverse=True):
        # sorted() is stable: records sharing an instant keep load order
        view[key] = sorted(buckets[key], key=lambda r: r.recorded_at)
    return view

"""JSON encoding for log records and aggregated views.

The on-disk and wire shapes use camelCase keys so partition files stay
readable by the dashboard that consumes ``/api/logs``.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from uptimepy.core.errors import CorruptPartitionError
from uptimepy.core.models import AggregatedView, LogRecord, ProbeResult

# Instants closer than a day to the datetime range cannot be shown in every zone.
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=1)
_LATEST = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)


def format_timestamp(instant: datetime) -> str:
    """Format an aware instant as ISO-8601 UTC with a ``Z`` suffix.

    Millisecond precision is used unless the instant carries sub-millisecond
    detail, which is kept so that records round-trip exactly.
    """
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware")
    utc = instant.astimezone(timezone.utc)
    timespec = "milliseconds" if utc.microsecond % 1000 == 0 else "microseconds"
    return utc.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        CorruptPartitionError: If the value is not a valid timestamp or lies
            too close to the edges of the representable range.
    """
    if not isinstance(value, str):
        raise CorruptPartitionError(f"timestamp must be a string, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise CorruptPartitionError(f"invalid timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        parsed = parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise CorruptPartitionError(f"timestamp out of range {value!r}") from exc
    if not _EARLIEST <= parsed <= _LATEST:
        raise CorruptPartitionError(f"timestamp out of range {value!r}")
    return parsed


def encode_probe(probe: ProbeResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "status": probe.success,
        "timestamp": format_timestamp(probe.instant),
        "responseTimeMs": probe.latency_ms,
    }
    if probe.status_code is not None:
        data["statusCode"] = probe.status_code
    if probe.error is not None:
        data["error"] = probe.error
    return data


def encode_record(record: LogRecord) -> dict[str, Any]:
    """Encode a record to its partition-file form."""
    return {
        "timestamp": format_timestamp(record.recorded_at),
        "timezone": record.timezone_label,
        "data": encode_probe(record.probe),
    }


def decode_record(obj: Any) -> LogRecord:
    """Decode one element of a partition file.

    Missing ``timezone`` defaults to ``UTC`` and a missing probe timestamp
    defaults to the record timestamp, matching files written by older
    collectors.

    Raises:
        CorruptPartitionError: If required fields are missing or mistyped.
    """
    if not isinstance(obj, Mapping):
        raise CorruptPartitionError(f"record must be an object, got {type(obj).__name__}")
    recorded_at = parse_timestamp(obj.get("timestamp"))
    data = obj.get("data")
    if not isinstance(data, Mapping):
        raise CorruptPartitionError("record is missing its 'data' object")

    status = data.get("status")
    latency = data.get("responseTimeMs")
    status_code = data.get("statusCode")
    error = data.get("error")
    if not isinstance(status, bool):
        raise CorruptPartitionError(f"'status' must be a boolean, got {status!r}")
    if isinstance(latency, bool) or not isinstance(latency, (int, float)) or latency < 0:
        raise CorruptPartitionError(f"'responseTimeMs' must be non-negative, got {latency!r}")
    if isinstance(latency, float) and not math.isfinite(latency):
        raise CorruptPartitionError(f"'responseTimeMs' must be finite, got {latency!r}")
    if status_code is not None and (
        isinstance(status_code, bool) or not isinstance(status_code, int)
    ):
        raise CorruptPartitionError(f"'statusCode' must be an integer, got {status_code!r}")

    probe_ts = data.get("timestamp")
    instant = parse_timestamp(probe_ts) if probe_ts is not None else recorded_at
    label = obj.get("timezone")
    return LogRecord(
        recorded_at=recorded_at,
        timezone_label=label if isinstance(label, str) else "UTC",
        probe=ProbeResult(
            instant=instant,
            success=status,
            latency_ms=round(latency),
            status_code=status_code,
            error=error if isinstance(error, str) else None,
        ),
    )


def encode_records(records: Iterable[LogRecord]) -> list[dict[str, Any]]:
    return [encode_record(record) for record in records]


def decode_records(payload: Any) -> list[LogRecord]:
    """Decode a whole partition payload.

    Raises:
        CorruptPartitionError: If the payload is not an array of valid records.
    """
    if not isinstance(payload, list):
        raise CorruptPartitionError(
            f"partition must be a JSON array, got {type(payload).__name__}"
        )
    return [decode_record(item) for item in payload]


def encode_view_entry(record: LogRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "status": record.probe.success,
        "responseTimeMs": record.probe.latency_ms,
    }
    if record.probe.status_code is not None:
        data["statusCode"] = record.probe.status_code
    return {"timestamp": format_timestamp(record.recorded_at), "data": data}


def encode_view(view: AggregatedView) -> dict[str, list[dict[str, Any]]]:
    """Encode an aggregated view to its wire form, preserving key order."""
    return {
        date_key: [encode_view_entry(record) for record in records]
        for date_key, records in view.items()
    }

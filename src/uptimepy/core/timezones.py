"""Timezone resolution backed by the IANA timezone database.

Local dates are always derived with ``zoneinfo`` so offset changes and DST
transitions come from the database rather than fixed-offset arithmetic.
"""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from uptimepy.core.errors import InvalidTimezone
from uptimepy.core.logs import get_logger
from uptimepy.core.models import WallClock

logger = get_logger(__name__)

FALLBACK_ZONE = "UTC"
DATE_KEY_FORMAT = "%Y-%m-%d"


def load_zone(zone_name: str) -> tzinfo:
    """Look up a zone in the timezone database.

    Raises:
        InvalidTimezone: If the name is empty, malformed, or unknown.
    """
    if not isinstance(zone_name, str) or not zone_name.strip():
        raise InvalidTimezone(str(zone_name))
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezone(zone_name) from exc


def _to_local(instant: datetime, zone: tzinfo) -> datetime:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")
    return instant.astimezone(zone)


def local_date_key(instant: datetime, zone_name: str) -> str:
    """Return the ``YYYY-MM-DD`` calendar date of ``instant`` in ``zone_name``.

    Raises:
        InvalidTimezone: If the zone name cannot be resolved.
        ValueError: If ``instant`` is naive.
    """
    return _to_local(instant, load_zone(zone_name)).strftime(DATE_KEY_FORMAT)


def local_wall_clock(instant: datetime, zone_name: str) -> WallClock:
    """Return the local wall-clock fields of ``instant`` in ``zone_name``.

    Raises:
        InvalidTimezone: If the zone name cannot be resolved.
        ValueError: If ``instant`` is naive.
    """
    return _wall_clock(_to_local(instant, load_zone(zone_name)))


def _wall_clock(local: datetime) -> WallClock:
    return WallClock(
        year=local.year,
        month=local.month,
        day=local.day,
        hour=local.hour,
        minute=local.minute,
        second=local.second,
    )


class TimeZoneResolver:
    """Converts instants to local dates for one configured zone.

    An unknown zone name does not raise here: the resolver falls back to UTC,
    sets ``fell_back`` and logs a warning. Every key afterwards is computed
    through the same UTC path, so repeated calls with the same bad name
    always agree.

    Example:
        ```python
        resolver = TimeZoneResolver("Asia/Kuala_Lumpur")
        resolver.date_key(datetime.now(timezone.utc))
        ```
    """

    def __init__(self, zone_name: str) -> None:
        self.requested_name = zone_name
        try:
            self._zone = load_zone(zone_name)
            self.zone_name = zone_name
            self.fell_back = False
        except InvalidTimezone:
            logger.warning(
                "Unknown timezone %r, falling back to %s", zone_name, FALLBACK_ZONE
            )
            self._zone = timezone.utc
            self.zone_name = FALLBACK_ZONE
            self.fell_back = True

    @property
    def zone(self) -> tzinfo:
        return self._zone

    def localize(self, instant: datetime) -> datetime:
        """Convert an aware instant to local time in the resolved zone."""
        return _to_local(instant, self._zone)

    def date_key(self, instant: datetime) -> str:
        """Return the local ``YYYY-MM-DD`` key for ``instant``."""
        return self.localize(instant).strftime(DATE_KEY_FORMAT)

    def wall_clock(self, instant: datetime) -> WallClock:
        """Return local wall-clock fields for ``instant``."""
        return _wall_clock(self.localize(instant))

    def __repr__(self) -> str:
        return f"TimeZoneResolver({self.zone_name!r}, fell_back={self.fell_back})"


def as_resolver(zone: "TimeZoneResolver | str") -> TimeZoneResolver:
    """Accept either a resolver or a zone name."""
    if isinstance(zone, TimeZoneResolver):
        return zone
    return TimeZoneResolver(zone)

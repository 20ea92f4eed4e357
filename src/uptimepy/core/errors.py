"""Exception types raised by uptimepy.

Probe failures are not exceptions: the prober records them as failed
results. Corrupt partitions are reported as data by the store, see
:class:`uptimepy.core.models.CorruptPartition`.
"""


class UptimeError(Exception):
    """Base class for uptimepy errors."""


class InvalidTimezone(UptimeError, ValueError):
    """Raised when a zone name is not in the timezone database."""

    def __init__(self, zone_name: str) -> None:
        super().__init__(f"Unknown timezone: {zone_name!r}")
        self.zone_name = zone_name


class StoreIOError(UptimeError):
    """Raised when a partition cannot be read or written."""


class CorruptPartitionError(UptimeError):
    """Raised when a partition file cannot be decoded."""


class ConfigError(UptimeError):
    """Raised when configuration values are missing or malformed."""

"""Query service backing the monitor's read endpoints."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from uptimepy.core.aggregate import aggregate
from uptimepy.core.encoding.records import encode_view, format_timestamp
from uptimepy.core.errors import StoreIOError
from uptimepy.core.logs import get_logger
from uptimepy.core.models import AggregatedView
from uptimepy.core.ports import LogStorePort
from uptimepy.core.summary import encode_summary, summarize_view
from uptimepy.core.timezones import TimeZoneResolver

logger = get_logger(__name__)

DEFAULT_MAX_PARTITIONS = 7


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonitorService:
    """Builds the payloads served to dashboards.

    Views are recomputed on every call, since both the loaded partitions and
    the local "today" change between requests.
    """

    def __init__(
        self,
        store: LogStorePort,
        resolver: TimeZoneResolver,
        max_partitions: int = DEFAULT_MAX_PARTITIONS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.max_partitions = max_partitions
        self._clock = clock

    def timezone_info(self) -> dict[str, str]:
        """Return the configured zone and today's local date key."""
        return {
            "timezone": self.resolver.zone_name,
            "formattedDate": self.resolver.date_key(self._clock()),
        }

    async def view(self) -> AggregatedView:
        """Load recent partitions and regroup them by local date.

        Corrupt partitions are skipped by the store. If none load, or the
        store cannot be read at all, the view is empty.
        """
        try:
            result = await self.store.load_recent(self.max_partitions)
        except StoreIOError as exc:
            logger.error("Cannot load partitions: %s", exc)
            return {}
        return aggregate(result.partitions, self.resolver)

    async def logs(self) -> dict[str, Any]:
        return {"timezone": self.resolver.zone_name, "logs": encode_view(await self.view())}

    async def summaries(self) -> dict[str, Any]:
        summaries = summarize_view(await self.view(), self.resolver)
        return {
            "timezone": self.resolver.zone_name,
            "days": {key: encode_summary(s) for key, s in summaries.items()},
        }

    def status(self) -> dict[str, Any]:
        """Health payload for the monitor process itself."""
        return {
            "status": "ok",
            "timestamp": format_timestamp(self._clock()),
            "responseTimeMs": 0,
        }

"""Integration tests for the ASGI read endpoints."""

import json
import logging
from pathlib import Path

import pytest

from tests.helpers import MutableClock, make_record, utc
from uptimepy.adapters.frameworks.asgi import create_asgi_app
from uptimepy.adapters.storage.json_files import JsonPartitionStore
from uptimepy.core.errors import StoreIOError
from uptimepy.core.models import LoadResult, LogRecord
from uptimepy.core.timezones import TimeZoneResolver
from uptimepy.service import MonitorService

pytestmark = [pytest.mark.tier(2), pytest.mark.asgi]


class BrokenStore:
    """LogStorePort double whose loads fail unexpectedly."""

    async def append(self, record: LogRecord) -> None:
        pass

    async def load_recent(self, max_partitions: int) -> LoadResult:
        raise RuntimeError("boom")


class UnreadableStore(BrokenStore):
    """LogStorePort double whose log directory cannot be listed."""

    async def load_recent(self, max_partitions: int) -> LoadResult:
        raise StoreIOError("Cannot list logs: permission denied")


@pytest.fixture
def kl_service(log_dir: Path, clock: MutableClock) -> MonitorService:
    resolver = TimeZoneResolver("Asia/Kuala_Lumpur")
    store = JsonPartitionStore(log_dir, resolver, clock=clock)
    return MonitorService(store, resolver, clock=clock)


class TestTimezoneEndpoint:
    """Tests for /api/timezone."""

    async def test_returns_zone_and_local_date(
        self, kl_service: MonitorService, clock: MutableClock, asgi_test_client
    ) -> None:
        clock.now = utc(2025, 5, 19, 16, 30)

        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/timezone")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"timezone": "Asia/Kuala_Lumpur", "formattedDate": "2025-05-20"}

    async def test_invalid_zone_reports_utc(
        self, log_dir: Path, clock: MutableClock, asgi_test_client
    ) -> None:
        resolver = TimeZoneResolver("Not/AZone")
        service = MonitorService(JsonPartitionStore(log_dir, resolver, clock=clock), resolver, clock=clock)

        async with asgi_test_client(create_asgi_app(service)) as client:
            response = await client.get("/api/timezone")

        assert response.json() == {"timezone": "UTC", "formattedDate": "2025-05-19"}


class TestLogsEndpoint:
    """Tests for /api/logs."""

    async def test_empty_store_returns_empty_logs(
        self, kl_service: MonitorService, asgi_test_client
    ) -> None:
        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/logs")

        assert response.status_code == 200
        assert response.json() == {"timezone": "Asia/Kuala_Lumpur", "logs": {}}

    async def test_logs_are_regrouped_by_local_date(
        self, kl_service: MonitorService, asgi_test_client
    ) -> None:
        # both written to the same partition; 16:00:10 UTC is past KL midnight
        await kl_service.store.extend(
            "2025-05-19",
            [
                make_record(utc(2025, 5, 19, 15, 59, 50), latency_ms=12),
                make_record(utc(2025, 5, 19, 16, 0, 10), latency_ms=45, success=False, status_code=503),
            ],
        )

        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/logs")

        assert response.json()["logs"] == {
            "2025-05-20": [
                {
                    "timestamp": "2025-05-19T16:00:10.000Z",
                    "data": {"status": False, "responseTimeMs": 45, "statusCode": 503},
                }
            ],
            "2025-05-19": [
                {
                    "timestamp": "2025-05-19T15:59:50.000Z",
                    "data": {"status": True, "responseTimeMs": 12, "statusCode": 200},
                }
            ],
        }

    async def test_all_partitions_corrupt_returns_empty_logs(
        self, kl_service: MonitorService, log_dir: Path, asgi_test_client
    ) -> None:
        log_dir.mkdir(parents=True)
        (log_dir / "2025-05-19.json").write_text("garbage", encoding="utf-8")
        (log_dir / "2025-05-18.json").write_text("{", encoding="utf-8")

        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/logs")

        assert response.status_code == 200
        assert response.json()["logs"] == {}

    async def test_unreadable_store_returns_empty_view(
        self, utc_resolver: TimeZoneResolver, asgi_test_client, caplog: pytest.LogCaptureFixture
    ) -> None:
        service = MonitorService(UnreadableStore(), utc_resolver)

        with caplog.at_level(logging.ERROR, logger="uptimepy"):
            async with asgi_test_client(create_asgi_app(service)) as client:
                logs = await client.get("/api/logs")
                summary = await client.get("/api/summary")

        assert logs.status_code == 200
        assert logs.json() == {"timezone": "UTC", "logs": {}}
        assert summary.status_code == 200
        assert summary.json()["days"] == {}
        assert "permission denied" in caplog.text

    async def test_out_of_range_record_does_not_hide_valid_days(
        self, log_dir: Path, clock: MutableClock, asgi_test_client
    ) -> None:
        resolver = TimeZoneResolver("Asia/Tokyo")
        service = MonitorService(JsonPartitionStore(log_dir, resolver, clock=clock), resolver, clock=clock)
        await service.store.extend("2025-05-18", [make_record(utc(2025, 5, 18, 3))])
        (log_dir / "2025-05-19.json").write_text(
            json.dumps(
                [
                    {
                        "timestamp": "9999-12-31T23:00:00Z",
                        "data": {"status": True, "responseTimeMs": 1},
                    }
                ]
            ),
            encoding="utf-8",
        )

        async with asgi_test_client(create_asgi_app(service)) as client:
            response = await client.get("/api/logs")

        assert response.status_code == 200
        assert list(response.json()["logs"]) == ["2025-05-18"]

    async def test_unexpected_error_returns_500(
        self, utc_resolver: TimeZoneResolver, asgi_test_client
    ) -> None:
        service = MonitorService(BrokenStore(), utc_resolver)

        async with asgi_test_client(create_asgi_app(service)) as client:
            response = await client.get("/api/logs")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


class TestOtherRoutes:
    """Tests for /api/summary, /api/status and routing."""

    async def test_summary(self, kl_service: MonitorService, asgi_test_client) -> None:
        await kl_service.store.extend(
            "2025-05-19", [make_record(utc(2025, 5, 19, 1)), make_record(utc(2025, 5, 19, 2), success=False)]
        )

        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/summary")

        day = response.json()["days"]["2025-05-19"]
        assert (day["up"], day["down"], day["total"]) == (1, 1, 2)
        assert day["uptimePercent"] == 50.0

    async def test_status(self, kl_service: MonitorService, asgi_test_client) -> None:
        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/api/status")

        assert response.json() == {
            "status": "ok",
            "timestamp": "2025-05-19T12:00:00.000Z",
            "responseTimeMs": 0,
        }

    async def test_unknown_path_returns_404(
        self, kl_service: MonitorService, asgi_test_client
    ) -> None:
        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.get("/unknown")

        assert response.status_code == 404

    async def test_post_is_rejected(self, kl_service: MonitorService, asgi_test_client) -> None:
        async with asgi_test_client(create_asgi_app(kl_service)) as client:
            response = await client.post("/api/logs")

        assert response.status_code == 405

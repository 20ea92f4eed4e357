"""Shared test fixtures for all test modules."""

from pathlib import Path

import httpx
import pytest

from tests.helpers import MutableClock, utc
from uptimepy.adapters.storage.json_files import JsonPartitionStore
from uptimepy.core.timezones import TimeZoneResolver


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for partition files."""
    return tmp_path / "logs"


@pytest.fixture
def utc_resolver() -> TimeZoneResolver:
    return TimeZoneResolver("UTC")


@pytest.fixture
def clock() -> MutableClock:
    """A controllable clock starting at 2025-05-19 12:00:00 UTC."""
    return MutableClock(utc(2025, 5, 19, 12, 0, 0))


@pytest.fixture
def json_store(
    log_dir: Path, utc_resolver: TimeZoneResolver, clock: MutableClock
) -> JsonPartitionStore:
    """JSON partition store in a temp dir, partitioned in UTC."""
    return JsonPartitionStore(log_dir, utc_resolver, clock=clock)


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(service)
            async with asgi_test_client(app) as client:
                response = await client.get("/api/logs")
    """

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client

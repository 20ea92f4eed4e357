"""FastAPI adapter for the monitor's read endpoints."""

from typing import Any

from fastapi import APIRouter

from uptimepy.service import MonitorService


def create_monitor_router(service: MonitorService) -> APIRouter:
    """Create a FastAPI router with the monitor's ``/api`` endpoints.

    Args:
        service: Query service backing the endpoints.

    Returns:
        APIRouter with /api/timezone, /api/logs, /api/summary and
        /api/status configured.
    """
    router = APIRouter(prefix="/api")

    @router.get("/timezone")
    async def get_timezone() -> dict[str, str]:
        """Return the configured zone and today's local date key."""
        return service.timezone_info()

    @router.get("/logs")
    async def get_logs() -> dict[str, Any]:
        """Return recent records grouped by local calendar date."""
        return await service.logs()

    @router.get("/summary")
    async def get_summary() -> dict[str, Any]:
        """Return per-day uptime statistics."""
        return await service.summaries()

    @router.get("/status")
    async def get_status() -> dict[str, Any]:
        """Health of the monitor process itself."""
        return service.status()

    return router

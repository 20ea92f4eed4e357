"""ASGI generic adapter for the monitor's read endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency.
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from uptimepy.core.logs import get_logger, log_exception
from uptimepy.service import MonitorService

logger = get_logger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

JSON_CONTENT_TYPE = "application/json"


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], Coroutine[Any, Any, Any]],
    log_message: str,
) -> None:
    """Execute an endpoint function and send its result as JSON.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Async function returning a JSON-serializable payload.
        log_message: Message to log on error.
    """
    try:
        body = json.dumps(await endpoint_func())
        await _send_response(send, 200, JSON_CONTENT_TYPE, body)
    except Exception:
        log_exception(log_message, logger)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, JSON_CONTENT_TYPE, error_body)


def create_asgi_app(service: MonitorService) -> ASGIApp:
    """Create an ASGI app with the monitor's ``/api`` endpoints.

    Routes:
        /api/timezone - configured zone and today's local date
        /api/logs     - recent records grouped by local date
        /api/summary  - per-day uptime statistics
        /api/status   - health of the monitor itself

    Args:
        service: Query service backing the endpoints.

    Returns:
        ASGI application callable.
    """

    async def timezone_info() -> dict[str, str]:
        return service.timezone_info()

    async def status() -> dict[str, Any]:
        return service.status()

    routes: dict[str, tuple[Callable[[], Coroutine[Any, Any, Any]], str]] = {
        "/api/timezone": (timezone_info, "Error serving timezone endpoint"),
        "/api/logs": (service.logs, "Error serving logs endpoint"),
        "/api/summary": (service.summaries, "Error serving summary endpoint"),
        "/api/status": (status, "Error serving status endpoint"),
    }

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        route = routes.get(scope["path"])
        if route is None:
            await _send_response(send, 404, "text/plain", "Not Found")
        elif scope.get("method", "GET") not in ("GET", "HEAD"):
            await _send_response(send, 405, "text/plain", "Method Not Allowed")
        else:
            endpoint, log_message = route
            await _handle_endpoint(send, endpoint, log_message)

    return app

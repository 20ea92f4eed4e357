"""HTTP prober adapter built on httpx."""

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timezone

import httpx

from uptimepy.core.logs import get_logger
from uptimepy.core.models import ProbeResult

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 5000

_REQUEST_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def build_target(base_url: str, health_path: str) -> str:
    """Join the configured host and health-check path."""
    if not health_path:
        return base_url
    return base_url.rstrip("/") + "/" + health_path.lstrip("/")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HttpProber:
    """Implementation of ProberPort issuing one GET per probe.

    Any 2xx response is a success. Timeouts, transport errors and other
    status codes are failures; none of them raise. Latency covers only
    the request itself, measured with ``time.perf_counter``; the body is
    never parsed.

    Args:
        timeout_ms: Upper bound on a probe, enforced by httpx and by an
            outer ``asyncio.wait_for`` so a stalled connection still
            completes within the bound.
        client: Optional shared ``httpx.AsyncClient``. When omitted, the
            prober creates one and closes it in :meth:`aclose`.
        clock: Source of the UTC dispatch instant.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_ms / 1000),
            headers=_REQUEST_HEADERS,
        )
        self._clock = clock

    async def probe(self, target: str) -> ProbeResult:
        """Probe ``target`` once."""
        instant = self._clock()
        timeout_s = self.timeout_ms / 1000
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.get(target, timeout=timeout_s), timeout=timeout_s
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            latency_ms = self._elapsed_ms(start)
            logger.debug("Probe of %s timed out after %d ms", target, latency_ms)
            return ProbeResult(
                instant=instant,
                success=False,
                latency_ms=latency_ms,
                error=f"timeout after {self.timeout_ms} ms",
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            latency_ms = self._elapsed_ms(start)
            logger.debug("Probe of %s failed: %s", target, exc)
            return ProbeResult(
                instant=instant,
                success=False,
                latency_ms=latency_ms,
                error=f"{type(exc).__name__}: {exc}",
            )
        latency_ms = self._elapsed_ms(start)
        return ProbeResult(
            instant=instant,
            success=response.is_success,
            latency_ms=latency_ms,
            status_code=response.status_code,
        )

    def _elapsed_ms(self, start: float) -> int:
        return min(round((time.perf_counter() - start) * 1000), self.timeout_ms)

    async def aclose(self) -> None:
        """Close the underlying client if this prober created it."""
        if self._owns_client:
            await self._client.aclose()

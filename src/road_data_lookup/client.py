"""Async HTTP client for the road-data API."""

from __future__ import annotations

import logging
from typing import Any

from anyio import fail_after
from httpx import AsyncClient, HTTPError, HTTPStatusError, TimeoutException

from .config import Settings
from .errors import MalformedResponse, TransportFailure
from .query import build_request

logger = logging.getLogger(__name__)


class RoadDataClient:
    """Posts XML query documents and returns the decoded JSON payload.

    Pass ``http`` to share or mock the underlying :class:`httpx.AsyncClient`;
    otherwise one is created and closed with this client.
    """

    def __init__(self, settings: Settings, *, http: AsyncClient | None = None):
        self.settings = settings
        self._owns_http = http is None
        self._http = http or AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.timeout_seconds,
        )

    async def __aenter__(self) -> RoadDataClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def build(self, object_type: str, **kwargs) -> bytes:
        """Build a request document carrying the configured credentials and schema."""
        return build_request(
            object_type,
            api_key=self.settings.api_key.get_secret_value(),
            namespace=self.settings.namespace,
            schema_version=self.settings.schema_version,
            **kwargs,
        )

    async def post(self, body: bytes) -> Any:
        """Send one request document.

        The whole exchange, body included, is bounded by ``timeout_seconds``.
        Raises TransportFailure for network errors, timeouts and non-2xx
        statuses, and MalformedResponse when the body is not JSON.
        """
        logger.debug("Posting %d byte query to %s", len(body), self.settings.api_url)
        try:
            with fail_after(self.settings.timeout_seconds):
                r = await self._http.post(
                    self.settings.api_url,
                    content=body,
                    headers={"Content-Type": "text/xml", "Accept": "application/json"},
                    timeout=self.settings.timeout_seconds,
                )
            r.raise_for_status()
        except HTTPStatusError as e:
            raise TransportFailure(
                f"Upstream responded {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (TimeoutException, TimeoutError) as e:
            raise TransportFailure(f"Upstream timed out after {self.settings.timeout_seconds:g}s") from e
        except HTTPError as e:
            raise TransportFailure(f"Upstream request failed: {e}") from e

        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponse("Upstream response is not valid JSON") from e

"""httpx-backed transport for OAuth 2.0 endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import parse_qs, urlparse

import httpx

from codegrant.transport.base import OAuth2Transport, TransportError

logger = logging.getLogger(__name__)


class HttpxTransport(OAuth2Transport):
    """OAuth2Transport built on httpx.AsyncClient.

    Token requests use application/x-www-form-urlencoded encoding as required
    by RFC 6749 Section 4.1.3. Any non-2xx response is reported as a
    TransportError that keeps the body for error decoding.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the transport.

        Args:
            timeout: HTTP request timeout in seconds, used when no client
                is supplied
            http_client: Optional pre-configured client. The caller keeps
                ownership and must close it.
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def post(self, endpoint: str, parameters: Mapping[str, str]) -> bytes:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        try:
            response = await self._http_client.post(
                endpoint, data=dict(parameters), headers=headers
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error posting to {endpoint}: {e}") from e

        if not response.is_success:
            logger.debug(f"POST {endpoint} returned {response.status_code}")
            raise TransportError(
                f"{endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.content,
            )

        return response.content

    def build_request(
        self, url: str, method: str, parameters: Mapping[str, str]
    ) -> httpx.Request:
        return httpx.Request(method, url, params=dict(parameters))

    def parse_query_parameters(self, url: str) -> dict[str, str]:
        query_params = parse_qs(urlparse(url).query)
        # Keep the first value of repeated keys
        return {key: values[0] for key, values in query_params.items() if values}

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._http_client.aclose()

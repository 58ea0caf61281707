from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import TracebackType
from typing import Self

import httpx


class TransportError(Exception):
    """Raised by a transport when a request cannot be completed.

    When the server answered with a non-success status, `body` carries the
    raw response body so an RFC 6749 error response can still be decoded.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: bytes | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class OAuth2Transport(ABC):
    """HTTP capability the OAuth flows depend on.

    Flows only see success bytes or a TransportError; headers, status
    handling and connection management belong to the transport.
    """

    @abstractmethod
    async def post(self, endpoint: str, parameters: Mapping[str, str]) -> bytes:
        """Submit form-encoded parameters and return the response body.

        Args:
            endpoint: URL to post to
            parameters: Form fields, already stripped of absent values

        Returns:
            Raw body of a successful response

        Raises:
            TransportError: If the request failed or the server returned a
                non-success status
        """

    @abstractmethod
    def build_request(
        self, url: str, method: str, parameters: Mapping[str, str]
    ) -> httpx.Request:
        """Build a request with the parameters encoded into the query string.

        Performs no network I/O.
        """

    @abstractmethod
    def parse_query_parameters(self, url: str) -> dict[str, str]:
        """Decode a URL's query component into single-valued parameters."""

    @abstractmethod
    async def close(self) -> None:
        """Release any connections held by the transport."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
        return None

"""OAuth 2.0 authorization code client.

Composes the authorization and token flows over one shared transport.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Self

import httpx

from codegrant.models.flow import AuthorizationRequest, AuthorizationResult
from codegrant.models.result import Result
from codegrant.models.tokens import (
    RefreshTokenRequest,
    TokenExchangeRequest,
    TokenExchangeResult,
)
from codegrant.services.authorization import AuthorizationFlow
from codegrant.services.tokens import TokenCallback, TokenFlow
from codegrant.transport.base import OAuth2Transport
from codegrant.transport.http import HttpxTransport

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Client-side OAuth 2.0 authorization code grant.

    Provides the four protocol operations:
    1. build_authorization_request - redirect for the user agent
    2. handle_authorization_callback - extract code and state
    3. exchange_token - trade the code for tokens
    4. refresh - trade a refresh token for new tokens

    Every operation returns a Result instead of raising.
    """

    def __init__(
        self,
        transport: OAuth2Transport | None = None,
        timeout: float = 30.0,
    ):
        """Initialize OAuth client.

        Args:
            transport: Transport to use. Defaults to an HttpxTransport.
            timeout: HTTP request timeout for the default transport
        """
        self.transport = transport or HttpxTransport(timeout=timeout)
        self.authorization_flow = AuthorizationFlow(self.transport)
        self.token_flow = TokenFlow(self.transport)

    def build_authorization_request(
        self, request: AuthorizationRequest
    ) -> httpx.Request:
        return self.authorization_flow.build_authorization_request(request)

    def handle_authorization_callback(
        self, callback_url: str | httpx.URL | None
    ) -> Result[AuthorizationResult]:
        """Parse the authorization callback. Does not verify state."""
        return self.authorization_flow.handle_authorization_callback(callback_url)

    async def exchange_token(
        self,
        request: TokenExchangeRequest,
        on_complete: TokenCallback | None = None,
    ) -> Result[TokenExchangeResult]:
        return await self.token_flow.exchange_token(request, on_complete)

    async def refresh(
        self,
        request: RefreshTokenRequest,
        on_complete: TokenCallback | None = None,
    ) -> Result[TokenExchangeResult]:
        return await self.token_flow.refresh(request, on_complete)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()

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

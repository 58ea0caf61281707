"""OAuth 2.0 token exchange and refresh service.

Implements the RFC 6749 token endpoint interactions: authorization code
exchange (Section 4.1.3) and access token refresh (Section 6).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Awaitable, Callable

from codegrant.models.errors import TransportFailureError
from codegrant.models.result import Failure, Result
from codegrant.models.tokens import (
    RefreshTokenRequest,
    TokenExchangeRequest,
    TokenExchangeResult,
)
from codegrant.services.decoding import decode_token_response, decode_transport_error
from codegrant.transport.base import OAuth2Transport, TransportError

logger = logging.getLogger(__name__)

TokenCallback = Callable[[Result[TokenExchangeResult]], Awaitable[None]]


class TokenFlow:
    """Submits token requests and maps responses to typed results.

    Both operations are single-shot coroutines. They never raise for
    protocol, transport or decode failures; the outcome is always a Result.
    Cancelling the awaiting task propagates asyncio.CancelledError and skips
    the completion callback.
    """

    def __init__(self, transport: OAuth2Transport):
        self._transport = transport

    async def exchange_token(
        self,
        request: TokenExchangeRequest,
        on_complete: TokenCallback | None = None,
    ) -> Result[TokenExchangeResult]:
        """Exchange an authorization code for tokens.

        Args:
            request: Token exchange request parameters
            on_complete: Optional callback awaited exactly once with the result

        Returns:
            Success with the token result, or Failure with ServerError,
            TransportFailureError or DecodeFailureError
        """
        logger.debug(
            f"Exchanging authorization code at {request.endpoint} "
            f"for client {request.client.client_id}"
        )
        result = await self._submit(request.endpoint, request.to_form_data())
        await self._complete(on_complete, result)
        return result

    async def refresh(
        self,
        request: RefreshTokenRequest,
        on_complete: TokenCallback | None = None,
    ) -> Result[TokenExchangeResult]:
        """Refresh an access token using a refresh token.

        Args:
            request: Refresh token request parameters
            on_complete: Optional callback awaited exactly once with the result

        Returns:
            Success with the new token result, or Failure as for exchange_token
        """
        logger.debug(f"Refreshing access token at {request.endpoint}")
        result = await self._submit(request.endpoint, request.to_form_data())
        await self._complete(on_complete, result)
        return result

    async def _submit(
        self, endpoint: str, form_data: Mapping[str, str]
    ) -> Result[TokenExchangeResult]:
        logger.debug(f"Token request: grant_type={form_data['grant_type']}")

        try:
            body = await self._transport.post(endpoint, form_data)
        except TransportError as e:
            return decode_transport_error(e)
        except Exception as e:
            logger.warning(f"Unexpected transport error posting to {endpoint}: {e}")
            return Failure(TransportFailureError(f"Unexpected transport error: {e}"))

        result = decode_token_response(body)
        if result.is_success():
            logger.info("Token request successful")
        return result

    async def _complete(
        self,
        on_complete: TokenCallback | None,
        result: Result[TokenExchangeResult],
    ) -> None:
        if on_complete is None:
            return
        try:
            await on_complete(result)
        except Exception:
            logger.exception("Token completion callback failed")

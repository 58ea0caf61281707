"""Single authorization code flow instance with state tracking.

AuthorizationCodeSession walks one flow through
Idle -> AuthorizationRequested -> Granted/Denied -> TokenRequested ->
TokenObtained/TokenExchangeFailed, verifying state on the callback and
reusing the authorization redirect_uri for the token exchange.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from codegrant.client import OAuth2Client
from codegrant.models.errors import StateMismatchError
from codegrant.models.flow import (
    AuthorizationRequest,
    AuthorizationResult,
    FlowState,
)
from codegrant.models.result import Failure, Result
from codegrant.models.tokens import TokenExchangeRequest, TokenExchangeResult
from codegrant.services.security import validate_state
from codegrant.services.tokens import TokenCallback

logger = logging.getLogger(__name__)


class FlowStateError(RuntimeError):
    """Raised when a session operation is called out of order."""


class AuthorizationCodeSession:
    """Tracks one authorization code flow from redirect to token.

    Unlike the stateless OAuth2Client operations, a session remembers the
    authorization request, so it can verify the callback state and send the
    same redirect_uri in the token exchange. Not meant to be shared between
    flows.
    """

    def __init__(
        self,
        client: OAuth2Client,
        request: AuthorizationRequest,
        verify_state: bool = True,
    ):
        """Initialize the session.

        Args:
            client: Client used for all protocol operations
            request: Authorization request that starts this flow
            verify_state: Compare the callback state against request.state
        """
        self.client = client
        self.request = request
        self.verify_state = verify_state
        self.state = FlowState.IDLE
        self._authorization: AuthorizationResult | None = None

    def authorization_request(self) -> httpx.Request:
        """Build the authorization redirect and mark the flow as requested."""
        self._require(FlowState.IDLE)
        auth_request = self.client.build_authorization_request(self.request)
        self._transition(FlowState.AUTHORIZATION_REQUESTED)
        return auth_request

    def handle_callback(
        self, callback_url: str | httpx.URL | None
    ) -> Result[AuthorizationResult]:
        """Process the authorization callback for this flow.

        Returns:
            Success with the authorization result, or Failure with any
            callback error, or StateMismatchError when verify_state is set
            and the state differs
        """
        self._require(FlowState.AUTHORIZATION_REQUESTED)
        result = self.client.handle_authorization_callback(callback_url)

        if result.is_success() and self.verify_state:
            if not validate_state(self.request.state, result.value.state):
                result = Failure(StateMismatchError(state=result.value.state))

        if result.is_success():
            self._authorization = result.value
            self._transition(FlowState.AUTHORIZATION_GRANTED)
        else:
            self._transition(FlowState.AUTHORIZATION_DENIED)
        return result

    async def exchange(
        self,
        token_endpoint: str,
        on_complete: TokenCallback | None = None,
    ) -> Result[TokenExchangeResult]:
        """Exchange the granted code for tokens.

        Args:
            token_endpoint: Token endpoint URL
            on_complete: Optional callback awaited exactly once with the result

        Cancelling the exchange ends the flow in TOKEN_EXCHANGE_FAILED.
        """
        self._require(FlowState.AUTHORIZATION_GRANTED)
        if self._authorization is None:
            raise FlowStateError("No authorization code recorded for this flow")

        token_request = TokenExchangeRequest(
            endpoint=token_endpoint,
            code=self._authorization.code,
            client=self.request.client,
            redirect_uri=self.request.redirect_uri,
        )
        self._transition(FlowState.TOKEN_REQUESTED)
        try:
            result = await self.client.exchange_token(token_request, on_complete)
        except asyncio.CancelledError:
            self._transition(FlowState.TOKEN_EXCHANGE_FAILED)
            raise

        self._transition(
            FlowState.TOKEN_OBTAINED
            if result.is_success()
            else FlowState.TOKEN_EXCHANGE_FAILED
        )
        return result

    def _require(self, expected: FlowState) -> None:
        if self.state != expected:
            raise FlowStateError(
                f"Operation requires flow state {expected}, current state is "
                f"{self.state}"
            )

    def _transition(self, new_state: FlowState) -> None:
        logger.debug(f"Authorization flow state {self.state} -> {new_state}")
        self.state = new_state

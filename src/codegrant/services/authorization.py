"""OAuth 2.0 authorization redirect and callback handling."""

from __future__ import annotations

import logging

import httpx

from codegrant.models.errors import (
    MissingCallbackURLError,
    MissingParameterError,
    ServerError,
)
from codegrant.models.flow import AuthorizationRequest, AuthorizationResult
from codegrant.models.result import Failure, Result, Success
from codegrant.transport.base import OAuth2Transport

logger = logging.getLogger(__name__)


class AuthorizationFlow:
    """Builds authorization redirects and parses their callbacks.

    Stateless: the flow only holds the transport, so one instance can serve
    any number of concurrent authorization flows.
    """

    def __init__(self, transport: OAuth2Transport):
        self._transport = transport

    def build_authorization_request(
        self, request: AuthorizationRequest
    ) -> httpx.Request:
        """Build the GET request the user agent should be sent to.

        Args:
            request: Authorization request parameters

        Returns:
            GET request to the authorization endpoint with client_id,
            response_type, redirect_uri, scope and state in the query string
        """
        logger.debug(
            f"Building authorization request for client {request.client.client_id}"
        )
        return self._transport.build_request(
            request.endpoint, "GET", request.to_query_params()
        )

    def handle_authorization_callback(
        self, callback_url: str | httpx.URL | None
    ) -> Result[AuthorizationResult]:
        """Parse the authorization server's redirect back to the client.

        The returned state is NOT compared against the originating request.
        Callers must compare it with the state they persisted before starting
        the flow; skipping that check defeats CSRF protection. See
        codegrant.services.security.validate_state.

        Args:
            callback_url: Full callback URL, or None if none was received

        Returns:
            Success with code and state, or Failure with
            MissingCallbackURLError, ServerError (the user or server denied
            the request), or MissingParameterError
        """
        if not callback_url:
            logger.warning("Authorization callback carried no URL")
            return Failure(MissingCallbackURLError())

        params = self._transport.parse_query_parameters(str(callback_url))

        # RFC 6749 Section 4.1.2.1
        if "error" in params:
            logger.warning(
                f"Authorization callback contained error: {params['error']} - "
                f"{params.get('error_description')}"
            )
            return Failure(
                ServerError(
                    params["error"],
                    error_description=params.get("error_description"),
                    error_uri=params.get("error_uri"),
                    state=params.get("state"),
                )
            )

        for name in ("code", "state"):
            if name not in params:
                logger.warning(f"Authorization callback missing {name} parameter")
                return Failure(MissingParameterError(name, state=params.get("state")))

        logger.info("Authorization callback successful - received authorization code")
        return Success(AuthorizationResult(code=params["code"], state=params["state"]))

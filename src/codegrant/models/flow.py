"""Authorization flow models for the OAuth 2.0 authorization code grant.

Contains models for the authorization redirect, the parsed callback, and
the states a single authorization code flow moves through.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from codegrant.models.client import OAuthClient


class ResponseType(StrEnum):
    CODE = "code"


class FlowState(StrEnum):
    """Lifecycle of one authorization code flow instance."""

    IDLE = "idle"
    AUTHORIZATION_REQUESTED = "authorization_requested"
    AUTHORIZATION_GRANTED = "authorization_granted"
    AUTHORIZATION_DENIED = "authorization_denied"
    TOKEN_REQUESTED = "token_requested"
    TOKEN_OBTAINED = "token_obtained"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            FlowState.AUTHORIZATION_DENIED,
            FlowState.TOKEN_OBTAINED,
            FlowState.TOKEN_EXCHANGE_FAILED,
        )


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization request parameters (RFC 6749 Section 4.1.1).

    `state` is an opaque value supplied by the caller. The caller must persist
    it and compare it against the callback to get CSRF protection.
    """

    endpoint: str
    client: OAuthClient
    redirect_uri: str
    scope: str
    state: str
    response_type: ResponseType = ResponseType.CODE

    def to_query_params(self) -> dict[str, str]:
        """Build the query parameters for the authorization redirect."""
        # TODO: add code_challenge and code_challenge_method once PKCE lands
        return {
            "client_id": self.client.client_id,
            "response_type": str(self.response_type),
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "state": self.state,
        }


@dataclass(frozen=True)
class AuthorizationResult:
    """Code and state extracted from a successful authorization callback."""

    code: str
    state: str

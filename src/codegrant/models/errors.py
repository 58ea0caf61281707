"""Error taxonomy for OAuth 2.0 authorization code flows.

Every failure a flow can produce is an OAuth2Error. Flows never raise these;
they are carried inside a Failure result so callers can branch on the type.
Use Result.unwrap() to opt back into exceptions.
"""

from __future__ import annotations

from typing import Any


class OAuth2Error(Exception):
    """Base error shaped after the RFC 6749 Section 5.2 error response."""

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        error_uri: str | None = None,
        state: str | None = None,
    ):
        super().__init__(error_description or error)
        self.error = error
        self.error_description = error_description
        self.error_uri = error_uri
        self.state = state

    def to_dict(self) -> dict[str, Any]:
        """Render as an RFC 6749 error body, omitting absent fields."""
        data = {
            "error": self.error,
            "error_description": self.error_description,
            "error_uri": self.error_uri,
            "state": self.state,
        }
        return {key: value for key, value in data.items() if value is not None}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error={self.error!r}, "
            f"error_description={self.error_description!r})"
        )


class MissingCallbackURLError(OAuth2Error):
    """Raised when the authorization callback carried no URL."""

    def __init__(self) -> None:
        super().__init__(
            "missing_callback_url",
            error_description="Authorization callback carried no URL",
        )


class MissingParameterError(OAuth2Error):
    """Raised when a success-shaped callback lacks a required parameter."""

    def __init__(self, parameter: str, state: str | None = None):
        super().__init__(
            "missing_parameter",
            error_description=f"Authorization callback missing required "
            f"'{parameter}' parameter",
            state=state,
        )
        self.parameter = parameter


class ServerError(OAuth2Error):
    """Raised when the authorization server reported an RFC 6749 error.

    The error code and optional fields are taken verbatim from the server,
    either from the callback query string (Section 4.1.2.1) or from the
    token endpoint's JSON body (Section 5.2).
    """


class TransportFailureError(OAuth2Error):
    """Raised when the transport could not complete the request."""

    def __init__(self, description: str, status_code: int | None = None):
        super().__init__("request_failed", error_description=description)
        self.status_code = status_code


class DecodeFailureError(OAuth2Error):
    """Raised when response bytes do not match the expected JSON shape."""

    def __init__(self, description: str):
        super().__init__("invalid_response", error_description=description)


class StateMismatchError(OAuth2Error):
    """Raised when the callback state does not match the state that was sent.

    This could indicate a CSRF attack or a callback from another flow.
    """

    def __init__(self, state: str | None = None):
        super().__init__(
            "state_mismatch",
            error_description="State parameter mismatch - possible CSRF attack",
            state=state,
        )

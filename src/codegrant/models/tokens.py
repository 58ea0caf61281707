"""Token endpoint models for OAuth 2.0.

Request models are immutable dataclasses that know their own form encoding.
Response models are pydantic models validated from the token endpoint's JSON.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from codegrant.models.client import OAuthClient


class GrantType(StrEnum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class TokenExchangeRequest:
    """Authorization code to access token request (RFC 6749 Section 4.1.3).

    `redirect_uri` must be identical to the one sent in the authorization
    request for the same flow.
    """

    endpoint: str
    code: str = field(repr=False)
    client: OAuthClient
    redirect_uri: str

    @property
    def grant_type(self) -> GrantType:
        return GrantType.AUTHORIZATION_CODE

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for an application/x-www-form-urlencoded body.

        client_secret is left out entirely for public clients.
        """
        data = {
            "grant_type": str(self.grant_type),
            "code": self.code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client.client_id,
        }
        if self.client.client_secret is not None:
            data["client_secret"] = self.client.client_secret
        return data


@dataclass(frozen=True)
class RefreshTokenRequest:
    """Refresh token request parameters (RFC 6749 Section 6)."""

    endpoint: str
    refresh_token: str = field(repr=False)
    scope: str | None = None
    # Confidential clients must authenticate when refreshing
    client: OAuthClient | None = None

    @property
    def grant_type(self) -> GrantType:
        return GrantType.REFRESH_TOKEN

    def to_form_data(self) -> dict[str, str]:
        data = {
            "grant_type": str(self.grant_type),
            "refresh_token": self.refresh_token,
        }

        if self.scope is not None:
            data["scope"] = self.scope
        if self.client is not None:
            data["client_id"] = self.client.client_id
            if self.client.client_secret is not None:
                data["client_secret"] = self.client.client_secret

        return data


class TokenExchangeResult(BaseModel):
    """Successful token response (RFC 6749 Section 5.1).

    Fields the server adds beyond the RFC are kept and exposed through
    `extension_parameters`.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str
    token_type: str
    expires_in: int | None = None  # Seconds until expiry
    refresh_token: str | None = None
    scope: str | None = None
    example_parameter: str | None = None

    @property
    def extension_parameters(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def calculate_expires_at(self, issued_at: float | None = None) -> float | None:
        """Calculate absolute expiry timestamp from expires_in.

        Args:
            issued_at: Unix timestamp the token was issued at. Defaults to now.

        Returns:
            Unix timestamp when token expires, or None if no expiry
        """
        if self.expires_in is None:
            return None
        if issued_at is None:
            issued_at = time.time()
        return issued_at + self.expires_in


class TokenErrorResponse(BaseModel):
    """Token endpoint error response (RFC 6749 Section 5.2)."""

    error: str
    error_description: str | None = None
    error_uri: str | None = None
    state: str | None = None

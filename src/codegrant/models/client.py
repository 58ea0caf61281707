from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class OAuthClient:
    """Registered application credentials.

    Public clients have no secret; confidential clients send it in the
    token request body.
    """

    client_id: str
    client_secret: str | None = field(default=None, repr=False)

"""State parameter utilities for CSRF protection.

The core flows never compare state on their own; these helpers are for
callers (and AuthorizationCodeSession) that persist and check it.
"""

from __future__ import annotations

import secrets
import string


def generate_state() -> str:
    """Generate cryptographically secure state parameter.

    Returns:
        Cryptographically secure random state string (32 characters)
    """
    alphabet = string.ascii_letters + string.digits + "-._~"
    return "".join(secrets.choice(alphabet) for _ in range(32))


def validate_state(expected: str, actual: str | None) -> bool:
    """Check a callback state against the state sent in the request.

    Uses a constant-time comparison.
    """
    if actual is None:
        return False
    return secrets.compare_digest(expected.encode(), actual.encode())

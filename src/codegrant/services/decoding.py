"""Token endpoint response decoding and error mapping.

Maps every transport outcome onto one error taxonomy:
- success bodies become TokenExchangeResult
- RFC 6749 Section 5.2 error bodies become ServerError, whatever the status
- unparseable bodies become DecodeFailureError
- transport failures without an error body become TransportFailureError
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from codegrant.models.errors import (
    DecodeFailureError,
    ServerError,
    TransportFailureError,
)
from codegrant.models.result import Failure, Result, Success
from codegrant.models.tokens import TokenErrorResponse, TokenExchangeResult
from codegrant.transport.base import TransportError

logger = logging.getLogger(__name__)


def decode_token_response(body: bytes) -> Result[TokenExchangeResult]:
    """Decode a token endpoint response body.

    Some servers report errors with a 200 status, so an `error` field is
    honored here too.
    """
    data = _load_json_object(body)
    if data is None:
        return Failure(DecodeFailureError("Token response is not a JSON object"))

    if data.get("error") is not None:
        return _server_error_from(data) or Failure(
            DecodeFailureError("Token error response has an invalid shape")
        )

    try:
        token = TokenExchangeResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Token response failed validation: {e.error_count()} errors")
        return Failure(DecodeFailureError(f"Invalid token response format: {e}"))

    return Success(token)


def decode_transport_error(error: TransportError) -> Failure:
    """Map a TransportError onto ServerError or TransportFailureError."""
    if error.body:
        data = _load_json_object(error.body)
        if data is not None and data.get("error") is not None:
            server_error = _server_error_from(data)
            if server_error is not None:
                return server_error

    logger.warning(f"Token request failed: {error}")
    return Failure(TransportFailureError(str(error), status_code=error.status_code))


def _load_json_object(body: bytes) -> dict[str, Any] | None:
    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        # Malformed or pathologically nested bodies
        return None
    return data if isinstance(data, dict) else None


def _server_error_from(data: dict[str, Any]) -> Failure | None:
    try:
        response = TokenErrorResponse.model_validate(data)
    except ValidationError:
        return None

    logger.warning(
        f"Token endpoint returned error: {response.error} - "
        f"{response.error_description or 'No description provided'}"
    )
    return Failure(
        ServerError(
            response.error,
            error_description=response.error_description,
            error_uri=response.error_uri,
            state=response.state,
        )
    )

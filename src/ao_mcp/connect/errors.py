"""AO network client error types.

Error codes are stable strings for programmatic handling. HTTP status codes
returned by compute and messenger units are mapped onto these classes.
"""

from __future__ import annotations

from typing import Any


class AOError(Exception):
    """Base error for all AO network client exceptions."""

    code: str = "internal_error"
    message: str = "An internal error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AOError):
    """Request rejected by the unit (400)."""

    code = "validation_error"
    message = "Request rejected by unit"
    status_code = 400


class NotFoundError(AOError):
    """Process or message not found (404)."""

    code = "not_found"
    message = "Process or message not found"
    status_code = 404


class RateLimitedError(AOError):
    """Unit rate limit exceeded (429)."""

    code = "rate_limited"
    message = "Rate limit exceeded"
    status_code = 429


class UnitUnavailableError(AOError):
    """Compute or messenger unit unreachable or unhealthy (502/503)."""

    code = "unit_unavailable"
    message = "Unit unavailable"
    status_code = 503


class RequestTimeoutError(AOError):
    """Request timed out (504).

    Note: Named to avoid shadowing Python's builtin TimeoutError.
    """

    code = "timeout"
    message = "Request timed out"
    status_code = 504


class InvalidWalletError(AOError):
    """Wallet key material cannot be used for signing.

    Raised when a JWK is missing fields, is not an RSA key, or has the
    wrong modulus size for Arweave signatures.
    """

    code = "invalid_wallet"
    message = "Invalid wallet"
    status_code = 400


STATUS_CODE_MAP: dict[int, type[AOError]] = {
    400: ValidationError,
    404: NotFoundError,
    429: RateLimitedError,
    502: UnitUnavailableError,
    503: UnitUnavailableError,
    504: RequestTimeoutError,
}


def raise_for_error_response(
    status_code: int,
    response_body: dict[str, Any],
) -> None:
    """Raise the AOError subclass matching an error response.

    Units report errors either as ``{"error": "text"}`` or as
    ``{"error": {"message": ..., "details": ...}}``.

    Raises:
        AOError: Appropriate subclass based on status code
    """
    error_data = response_body.get("error", {})
    if isinstance(error_data, str):
        message: str | None = error_data
        details: dict[str, Any] = {}
    else:
        message = error_data.get("message")
        details = error_data.get("details", {})

    error_class = STATUS_CODE_MAP.get(status_code, AOError)
    raise error_class(message=message, details=details)

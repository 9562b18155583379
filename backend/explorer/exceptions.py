"""
NASA Explorer Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for every failure the proxy and the
       client controllers can run into.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned), an HTTP status and a machine-readable code.
       Global handlers in main.py turn them into the error envelope
       `{ok: false, error, code, request_id}`. Client controllers catch them
       and copy the message into their state.
Who:   Raised by validators, the NASA client and the proxy client.

Exception Hierarchy:
    ExplorerError (base)
    ├── ValidationError          → 400 Bad Request (user can fix the input)
    ├── ConfigurationError       → 500 Internal Server Error (missing credential)
    ├── UpstreamError            → 502 Bad Gateway (non-2xx or malformed payload)
    ├── TransportError           → 502 Bad Gateway (network failure, timeout)
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class ExplorerError(Exception):
    """
    Base exception for all NASA Explorer errors.

    Attributes:
        message:      User-facing error description (safe to return)
        context:      Additional debug info (logged but NOT returned)
        status_code:  HTTP status used by the proxy's exception handlers
        code:         Machine-readable error code for the envelope
    """

    status_code: int = 500
    code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ExplorerError):
    """
    Raised when user input fails validation.

    When:    Empty search term, empty or malformed date, non-numeric count.
    HTTP:    400 Bad Request. Raised before any network call is made.
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConfigurationError(ExplorerError):
    """
    Raised when the server is missing configuration it cannot run without.

    When:    NASA_API_KEY is absent and an APOD request arrives.
    HTTP:    500 Internal Server Error. Not recoverable by the user.
    """

    status_code = 500
    code = "configuration_error"

    def __init__(
        self,
        message: str = "Server configuration is incomplete",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(ExplorerError):
    """
    Raised when an upstream answered, but not with something usable.

    When:    NASA returned a non-2xx status, a body that is not JSON, or JSON
             missing required fields. Client side: the proxy answered non-2xx
             or `ok: false`.
    HTTP:    502 Bad Gateway.

    upstream_status keeps the status the upstream actually sent, when known.
    """

    status_code = 502
    code = "upstream_error"

    def __init__(
        self,
        message: str = "The NASA API returned an unexpected response",
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if upstream_status is not None:
            ctx["upstream_status"] = upstream_status
        super().__init__(message=message, context=ctx)
        self.upstream_status = upstream_status


class TransportError(ExplorerError):
    """
    Raised when a request never produced a response.

    When:    DNS failure, refused connection, timeout, after retries ran out.
    HTTP:    502 Bad Gateway.
    """

    status_code = 502
    code = "transport_error"

    def __init__(
        self,
        message: str = "Could not reach the NASA API. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(ExplorerError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    status_code = 429
    code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

"""Administrative API client library.

Architecture:
- client.py: HTTP gateway with timeouts, credentials and error normalization
- exceptions.py: Typed exceptions for error handling

Usage:
    from adminconsole.core.api import ApiGateway, ApiError, NO_CONTENT

    gateway = ApiGateway("http://localhost:5000/api")
    try:
        me = gateway.get("/auth/me")
    except ApiError as exc:
        print(exc.display_text)
"""
from .client import (
    ApiGateway,
    InFlightIndicator,
    NoContent,
    NO_CONTENT,
    REQUEST_TIMEOUT,
    DEFAULT_API_BASE_URL,
    AUTH_FAILED_DETAIL,
)
from .exceptions import (
    ConsoleError,
    ApiError,
    RequestTimeoutError,
    ValidationError,
)

__all__ = [
    # Client
    "ApiGateway",
    "InFlightIndicator",
    "NoContent",
    "NO_CONTENT",
    "REQUEST_TIMEOUT",
    "DEFAULT_API_BASE_URL",
    "AUTH_FAILED_DETAIL",

    # Exceptions
    "ConsoleError",
    "ApiError",
    "RequestTimeoutError",
    "ValidationError",
]

"""Console-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class ConsoleError(Exception):
    """Base exception for all console operations."""
    pass


class ApiError(ConsoleError):
    """Normalized failure from the remote administrative API.

    Every transport and protocol failure raised by ``ApiGateway`` takes this
    shape, whatever went wrong on the wire.

    Attributes:
        message: Short summary of the failure
        detail: Server-supplied or synthesized explanation
        field_errors: Per-field validation messages reported by the server
        status_code: HTTP status code (None for transport failures)
        endpoint: API endpoint that failed
    """

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        field_errors: Optional[dict[str, list[str]]] = None,
        status_code: Optional[int] = None,
        endpoint: str = "",
    ):
        self.message = message
        self.detail = detail
        self.field_errors = field_errors
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}" if status_code else message)

    @property
    def display_text(self) -> str:
        """Text shown to the operator: detail when available, else message."""
        return self.detail or self.message

    def flattened_field_errors(self) -> str:
        """All field messages joined into one line (empty when none)."""
        if not self.field_errors:
            return ""
        messages: list[str] = []
        for value in self.field_errors.values():
            if isinstance(value, (list, tuple)):
                messages.extend(str(item) for item in value)
            else:
                messages.append(str(value))
        return " ".join(messages)


class RequestTimeoutError(ApiError):
    """Request exceeded the gateway timeout and was abandoned."""

    def __init__(self, endpoint: str = ""):
        super().__init__(
            "Request Timed Out",
            detail="The server did not respond in time.",
            endpoint=endpoint,
        )


class ValidationError(ConsoleError):
    """Local input violation, resolved before any network call.

    Attributes:
        errors: Mapping of field name to message
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))

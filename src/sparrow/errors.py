"""Sparrow exception hierarchy.

Shared across Router, App, the request pipeline and middleware so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class SparrowError(Exception):
    """Base for all sparrow-specific errors."""


class ConfigurationError(SparrowError):
    """Raised when app configuration is invalid.

    Typically raised while registering routes or during ``App._freeze()``.
    """


class ResponseAlreadySent(SparrowError):  # noqa: N818
    """Raised when a second response is sent for the same request."""


@dataclass(frozen=True, slots=True)
class HTTPError(SparrowError):
    """An error that maps directly to an HTTP status code.

    Signalled by the router, body parsers, or handlers. Without a
    registered error stage, the status and detail become the response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: the request body could not be parsed."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the request body exceeds the configured limit."""

    def __init__(self, limit: int, detail: str = "") -> None:
        super().__init__(
            status=413,
            detail=detail or f"Request body exceeds the limit of {limit} bytes",
        )

"""Middleware protocol and the step values a middleware returns.

A middleware is any callable matching::

    def mw(request: Request) -> Step: ...
    async def mw(request: Request) -> Step: ...

No base class required. The chain driver inspects what comes back:

- ``None`` / ``NEXT``: run the next middleware with the same request
- ``Continue(request)``: run the next middleware with a new request
- ``Failure(error)``: stop; hand *error* to the app's error stage
- a ``Response`` (or str, dict, ...): stop; send it

Raising an exception is treated exactly like returning ``Failure``.
"""

from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from sparrow.http.request import Request


@dataclass(frozen=True, slots=True)
class Continue:
    """Proceed to the next stage, optionally with a replacement request."""

    request: Request | None = None


@dataclass(frozen=True, slots=True)
class Failure:
    """Skip every remaining stage and enter the error stage with *error*."""

    error: Exception


NEXT = Continue()
"""Proceed with the current request."""

# What a middleware may return; anything else is negotiated into a Response
Step: TypeAlias = Continue | Failure | Any


class Middleware(Protocol):
    """Protocol for sparrow middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def first(request: Request) -> Step:
            logger.info("First Middleware")
            return NEXT

        # Class middleware
        class RequireJSON:
            async def __call__(self, request: Request) -> Step:
                if request.media_type != "application/json":
                    return Response("JSON only").with_status(415)
                return NEXT
    """

    def __call__(self, request: Request) -> Step: ...

"""Request-scoped context via ContextVar.

``request_var`` holds the request currently flowing through the chain.
It is set by the pipeline before the first middleware runs, updated
whenever a middleware continues with a replacement request, and reset
once the response is chosen.

``ContextVar`` is task-local under asyncio, so concurrent requests on
one event loop never see each other's values.
"""

from contextvars import ContextVar

from sparrow.http.request import Request

request_var: ContextVar[Request] = ContextVar("sparrow_request")
"""The current request. Set by the pipeline before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()

"""Error stage and not-found fallback.

The error stage is terminal: it turns the first signalled error into
exactly one response and never resumes the chain. Operators always get
the detail in the log; clients get a generic body unless the app's own
error stage decides otherwise.
"""

import html
import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from sparrow._internal.invoke import invoke
from sparrow.errors import HTTPError
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.server.negotiation import negotiate

logger = logging.getLogger("sparrow.server")

INTERNAL_ERROR_BODY = "Internal Server Error"


def _log_error(exc: Exception, request: Request) -> None:
    if isinstance(exc, HTTPError) and exc.status < 500:
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        return
    logger.error("500 %s %s: %s", request.method, request.path, exc, exc_info=exc)


def default_error_response(exc: Exception, *, debug: bool = False) -> Response:
    """The response sent when no error stage is registered.

    ``HTTPError`` keeps its status, detail and headers; anything else is
    a bare 500. In debug mode the traceback is shown as plain text.
    """
    if isinstance(exc, HTTPError):
        response = Response(
            body=exc.detail or f"Error {exc.status}",
            status=exc.status,
            content_type="text/plain; charset=utf-8",
        )
        for name, value in exc.headers:
            response = response.with_header(name, value)
        return response

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type="text/plain; charset=utf-8")

    return Response(body=INTERNAL_ERROR_BODY, status=500, content_type="text/plain; charset=utf-8")


async def call_error_handler(
    handler: Callable[..., Any],
    exc: Exception,
    request: Request,
) -> Response:
    """Invoke a user error stage with introspected arguments.

    Error stages may accept ``(error, request)``, ``(error)`` or nothing.
    Supports both sync and async callables.
    """
    params = list(inspect.signature(handler).parameters.values())
    if len(params) >= 2:
        result = await invoke(handler, exc, request)
    elif len(params) == 1:
        result = await invoke(handler, exc)
    else:
        result = await invoke(handler)
    return negotiate(result)


async def handle_error(
    exc: Exception,
    request: Request,
    error_handler: Callable[..., Any] | None,
    *,
    debug: bool = False,
) -> Response:
    """Run the error stage for a signalled error."""
    _log_error(exc, request)

    if error_handler is None:
        return default_error_response(exc, debug=debug)

    try:
        return await call_error_handler(error_handler, exc, request)
    except Exception:
        logger.exception("Error stage failed for %s %s", request.method, request.path)
        return default_error_response(RuntimeError(INTERNAL_ERROR_BODY))


async def handle_not_found(
    request: Request,
    not_found_handler: Callable[..., Any] | None,
) -> Response:
    """Answer a request that no route accepted.

    Without a custom handler the body is ``Cannot {METHOD} {path}``.
    A custom handler keeps the 404 status unless it returns its own.
    """
    logger.debug("404 %s %s", request.method, request.path)

    if not_found_handler is None:
        body = f"Cannot {request.method} {html.escape(request.path)}"
        return Response(body=body, status=404)

    params = inspect.signature(not_found_handler).parameters
    result = await invoke(not_found_handler, request) if params else await invoke(not_found_handler)
    response = negotiate(result)
    if response.status == 200:
        response = response.with_status(404)
    return response

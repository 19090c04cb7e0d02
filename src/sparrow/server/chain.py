"""Middleware chain driver.

Runs the frozen middleware tuple as a loop over step values instead of
nesting ``next`` callbacks. Every middleware for a request runs on the
same task, strictly in registration order.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeAlias

from sparrow._internal.invoke import invoke
from sparrow.context import request_var
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.middleware.protocol import Continue, Failure
from sparrow.server.negotiation import negotiate

Outcome: TypeAlias = Response | Failure

# The stage after the last middleware (route dispatch)
Endpoint: TypeAlias = Callable[[Request], Awaitable[Outcome]]


async def run_chain(
    request: Request,
    middleware: Sequence[Callable[..., Any]],
    endpoint: Endpoint,
) -> Outcome:
    """Drive *request* through *middleware*, then *endpoint*.

    Returns the chosen ``Response``, or the first ``Failure`` signalled.
    Exceptions raised by a middleware or the endpoint are wrapped in a
    ``Failure``; nothing after the failing stage runs.
    """
    for mw in middleware:
        try:
            step = await invoke(mw, request)
        except Exception as exc:
            return Failure(exc)

        match step:
            case None | Continue(request=None):
                continue
            case Continue(request=Request() as replacement):
                request = replacement
                request_var.set(request)
            case Failure():
                return step
            case _:
                try:
                    return negotiate(step)
                except TypeError as exc:
                    return Failure(exc)

    try:
        return await endpoint(request)
    except Exception as exc:
        return Failure(exc)

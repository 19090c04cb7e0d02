"""ASGI handler: translates ASGI scope/messages to sparrow types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, drives them through the middleware chain and
router, and sends exactly one Response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from contextvars import Token
from typing import Any

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow._internal.invoke import invoke
from sparrow.context import request_var
from sparrow.errors import BadRequest, NotFound
from sparrow.http.request import Request
from sparrow.middleware.protocol import Failure
from sparrow.routing.route import RouteMatch
from sparrow.routing.router import Router
from sparrow.server.chain import Outcome, run_chain
from sparrow.server.errors import handle_error, handle_not_found
from sparrow.server.negotiation import negotiate
from sparrow.server.sender import ResponseSender


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handler: Callable[..., Any] | None = None,
    not_found_handler: Callable[..., Any] | None = None,
    debug: bool = False,
    max_body_size: int | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, max_body_size=max_body_size)
    sender = ResponseSender(send, head=request.method == "HEAD")

    async def dispatch(req: Request) -> Outcome:
        try:
            segments = req.segments
        except UnicodeDecodeError:
            return Failure(BadRequest(f"Malformed percent-encoding in path {req.path!r}"))
        try:
            match = router.match_parts(req.method, segments, path=req.path)
        except NotFound:
            return await handle_not_found(req, not_found_handler)
        return await _invoke_handler(match, req)

    token: Token[Request] = request_var.set(request)
    try:
        outcome = await run_chain(request, middleware, dispatch)
        if isinstance(outcome, Failure):
            response = await handle_error(
                outcome.error, request_var.get(), error_handler, debug=debug
            )
        else:
            response = outcome
    finally:
        request_var.reset(token)

    await sender.send(response)


async def _invoke_handler(match: RouteMatch, request: Request) -> Outcome:
    """Call the matched route handler with bound parameters."""
    handler = match.route.handler
    request = request.with_path_params(match.path_params)
    request_var.set(request)

    result = await invoke(handler, **_build_handler_kwargs(handler, request))
    if isinstance(result, Failure):
        return result
    return negotiate(result)


def _build_handler_kwargs(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Inspect the handler signature and build kwargs.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters, by name, as strings
    3. ``**kwargs`` receives any remaining path parameters
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}
    accepts_extra = False

    for name, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            accepts_extra = True
        elif name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            kwargs[name] = request.path_params[name]

    if accepts_extra:
        for name, value in request.path_params.items():
            kwargs.setdefault(name, value)

    return kwargs

"""Body parser middleware: JSON and URL-encoded forms.

Each parser only touches requests whose Content-Type it understands and
leaves ``request.body`` as an empty dict otherwise, so handlers further
down the chain can always read ``request.body``. Malformed or oversize
bodies are signalled as ``Failure`` values; the parsers never raise
into the pipeline.
"""

import json as json_module
import logging

from sparrow.errors import BadRequest, HTTPError, PayloadTooLarge
from sparrow.http.forms import DEFAULT_DEPTH, parse_urlencoded
from sparrow.http.request import Request
from sparrow.middleware.protocol import Continue, Failure, Step

logger = logging.getLogger("sparrow.middleware")

DEFAULT_LIMIT = 100 * 1024  # 100 KiB
DEFAULT_PARAMETER_LIMIT = 1000


def _ensure_body(request: Request) -> Request:
    if request.body is None:
        return request.with_body({})
    return request


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


class JSONBodyParser:
    """Parse ``application/json`` (and ``application/*+json``) bodies.

    Args:
        limit: Maximum body size in bytes.
        strict: Accept only objects and arrays at the top level.

    Usage::

        app.use(JSONBodyParser())

        @app.post("/items")
        def create(request: Request):
            return {"received": request.body}
    """

    __slots__ = ("limit", "strict")

    def __init__(self, *, limit: int = DEFAULT_LIMIT, strict: bool = True) -> None:
        self.limit = limit
        self.strict = strict

    async def __call__(self, request: Request) -> Step:
        request = _ensure_body(request)
        if not _is_json(request.media_type):
            return Continue(request)

        try:
            raw = await request.raw_body(limit=self.limit)
        except PayloadTooLarge as exc:
            return Failure(exc)

        if not raw.strip():
            return Continue(request)

        try:
            value = json_module.loads(raw)
        except ValueError as exc:
            logger.debug("Rejected JSON body on %s %s: %s", request.method, request.path, exc)
            return Failure(BadRequest(f"Malformed JSON body: {exc}"))

        if self.strict and not isinstance(value, dict | list):
            return Failure(BadRequest("JSON body must be an object or an array"))

        return Continue(request.with_body(value))


class URLEncodedBodyParser:
    """Parse ``application/x-www-form-urlencoded`` bodies.

    Args:
        limit: Maximum body size in bytes.
        extended: Decode ``a[b]=c`` / ``a[]=c`` keys into nested dicts and
            lists instead of a flat ``FormData``.
        depth: Maximum bracket nesting in extended mode; deeper groups
            stay part of the innermost key.
        parameter_limit: Maximum number of fields accepted.
    """

    __slots__ = ("depth", "extended", "limit", "parameter_limit")

    def __init__(
        self,
        *,
        limit: int = DEFAULT_LIMIT,
        extended: bool = False,
        parameter_limit: int = DEFAULT_PARAMETER_LIMIT,
        depth: int = DEFAULT_DEPTH,
    ) -> None:
        self.limit = limit
        self.extended = extended
        self.parameter_limit = parameter_limit
        self.depth = depth

    async def __call__(self, request: Request) -> Step:
        request = _ensure_body(request)
        if request.media_type != "application/x-www-form-urlencoded":
            return Continue(request)

        try:
            raw = await request.raw_body(limit=self.limit)
        except PayloadTooLarge as exc:
            return Failure(exc)

        if not raw:
            return Continue(request)

        if raw.count(b"&") + 1 > self.parameter_limit:
            return Failure(
                HTTPError(status=413, detail=f"More than {self.parameter_limit} form parameters")
            )

        try:
            value = parse_urlencoded(raw, extended=self.extended, depth=self.depth)
        except ValueError as exc:
            logger.debug("Rejected form body on %s %s: %s", request.method, request.path, exc)
            return Failure(BadRequest(f"Malformed form body: {exc}"))

        return Continue(request.with_body(value))

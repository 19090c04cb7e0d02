"""Content negotiation: maps return values to Response objects.

isinstance-based dispatch over what a handler, a middleware or the
error stage returned. No magic, fully predictable.
"""

import json as json_module
from typing import Any

from sparrow.http.response import Response


def negotiate(value: Any) -> Response:
    """Convert a returned value into a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``str``                 -> 200, text/html
    3. ``bytes``               -> 200, application/octet-stream
    4. ``dict`` / ``list``     -> 200, application/json
    5. ``(value, int)``        -> negotiate value, override status
    6. ``(value, int, dict)``  -> negotiate value, override status + headers

    Anything else (``None`` included) raises ``TypeError``; the pipeline
    routes that to the error stage like any other failure.
    """
    match value:
        case Response():
            return value
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner).with_status(status).with_headers(headers)
        case None:
            msg = "Handler returned None; return a str, dict, bytes, or Response."
            raise TypeError(msg)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, dict, list, bytes, a (value, status) tuple, or Response."
            )
            raise TypeError(msg)

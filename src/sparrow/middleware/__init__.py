"""Middleware: protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(request: Request) -> Step        (or async def)

Built-in middleware:
    JSONBodyParser -- parse application/json bodies into request.body
    URLEncodedBodyParser -- parse HTML form bodies into request.body
"""

from sparrow.middleware.body import JSONBodyParser, URLEncodedBodyParser
from sparrow.middleware.protocol import NEXT, Continue, Failure, Middleware, Step

__all__ = [
    "NEXT",
    "Continue",
    "Failure",
    "JSONBodyParser",
    "Middleware",
    "Step",
    "URLEncodedBodyParser",
]

"""Immutable HTTP request.

Frozen metadata with async raw-body access. Middleware that learns
something about the request (a parsed body, bound path parameters)
produces a new ``Request`` instead of mutating the one it was given.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator
from dataclasses import dataclass, field, replace
from typing import Any

from sparrow._internal.asgi import Receive, Scope
from sparrow.errors import PayloadTooLarge
from sparrow.http.headers import Headers
from sparrow.http.multidict import QueryParams
from sparrow.routing.route import split_path


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``body`` holds the *parsed* body and stays ``None`` until a body
    parser middleware fills it in. The raw bytes are read on demand with
    ``await request.raw_body()`` and cached, so several parsers can look
    at the same body without consuming the ASGI stream twice.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    raw_path: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    body: Any = None
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    max_body_size: int | None = field(default=None, repr=False)

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: raw body cache shared by every copy made with with_*()
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def segments(self) -> tuple[str, ...]:
        """Percent-decoded path segments, split on the undecoded path.

        Splitting before decoding keeps an encoded ``%2F`` inside a
        single segment. Raises ``UnicodeDecodeError`` when an escape
        sequence is not valid UTF-8.
        """
        if self.raw_path:
            return split_path(self.raw_path.decode("latin-1"), decode=True)
        return split_path(self.path)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def media_type(self) -> str:
        """Lower-cased Content-Type without parameters (``""`` if absent)."""
        return (self.content_type or "").split(";", 1)[0].strip().lower()

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw.decode('latin-1')}"
        return self.path

    # -- Derived copies --

    def with_body(self, body: Any) -> Request:
        """Return a copy carrying a parsed body."""
        return replace(self, body=body)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying bound route parameters."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks straight from the server."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def raw_body(self, *, limit: int | None = None) -> bytes:
        """Read the full request body.

        Raises ``PayloadTooLarge`` as soon as the declared or received
        size exceeds *limit* (``max_body_size`` when not given). The
        result is cached.
        """
        if limit is None:
            limit = self.max_body_size
        if "raw" in self._cache:
            cached: bytes = self._cache["raw"]
            if limit is not None and len(cached) > limit:
                raise PayloadTooLarge(limit)
            return cached

        declared = self.content_length
        if limit is not None and declared is not None and declared > limit:
            raise PayloadTooLarge(limit)

        chunks: list[bytes] = []
        size = 0
        async for chunk in self.stream():
            size += len(chunk)
            if limit is not None and size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)

        result = b"".join(chunks)
        self._cache["raw"] = result
        return result

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.raw_body()).decode("utf-8")

    async def json(self) -> Any:
        """Read and decode the body as JSON, ignoring body parsers."""
        return json_module.loads(await self.raw_body())

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        max_body_size: int | None = None,
    ) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            raw_path=scope.get("raw_path") or b"",
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            max_body_size=max_body_size,
            _receive=receive,
        )

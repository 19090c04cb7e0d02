"""Route, PathSegment and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

PARAM_SIGIL = ":"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:  ``about``     (is_param=False)
    Param:    ``:username`` (is_param=True, param_name="username")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]


def split_path(path: str, *, decode: bool = False) -> tuple[str, ...]:
    """Split a URL path into segments.

    The leading slash and one trailing slash are ignored, so ``/about``
    and ``/about/`` give the same segments. Inner empty segments are
    kept (``/a//b`` -> ``("a", "", "b")``). With *decode*, each segment
    is percent-decoded after splitting; escapes that are not valid UTF-8
    raise ``UnicodeDecodeError``.
    """
    trimmed = path.removeprefix("/")
    if trimmed.endswith("/"):
        trimmed = trimmed[:-1]
    if not trimmed:
        return ()
    parts = trimmed.split("/")
    if decode:
        return tuple(unquote(part, errors="strict") for part in parts)
    return tuple(parts)

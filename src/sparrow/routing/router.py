"""First-match router over literal and ``:param`` patterns.

Patterns are tried in registration order and the first whose method,
segment count and literal segments all agree wins. There is no
specificity ranking and no backtracking across candidates: register
``/profile/me`` before ``/profile/:username`` if both should exist.
"""

from collections.abc import Sequence

from sparrow.errors import ConfigurationError, NotFound
from sparrow.routing.route import PARAM_SIGIL, PathSegment, Route, RouteMatch, split_path


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/"                        -> ()
        "/about"                   -> (PathSegment("about"),)
        "/profile/:username"       -> (PathSegment("profile"),
                                       PathSegment(":username", is_param=True,
                                                   param_name="username"))

    Raises ``ConfigurationError`` for ``{name}`` / ``<name>`` placeholders,
    invalid parameter names, and names used twice in one pattern.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in split_path(path):
        if (part.startswith("{") and part.endswith("}")) or (
            part.startswith("<") and part.endswith(">")
        ):
            msg = (
                f"Route {path!r} uses a {part!r} placeholder. "
                f"Declare parameters with the {PARAM_SIGIL!r} sigil, e.g. '/users/:id'."
            )
            raise ConfigurationError(msg)

        if not part.startswith(PARAM_SIGIL):
            segments.append(PathSegment(value=part))
            continue

        name = part[len(PARAM_SIGIL) :]
        if not name.isidentifier():
            msg = f"Route {path!r}: {name!r} is not a valid parameter name."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Route {path!r} declares parameter {name!r} more than once."
            raise ConfigurationError(msg)
        seen.add(name)
        segments.append(PathSegment(value=part, is_param=True, param_name=name))
    return tuple(segments)


def match_segments(
    pattern: Sequence[PathSegment],
    parts: Sequence[str],
) -> dict[str, str] | None:
    """Match request segments against a compiled pattern.

    Returns the bound parameters, or ``None`` if the pattern does not
    apply. Literal segments compare exactly; a parameter accepts any
    single non-empty segment.
    """
    if len(pattern) != len(parts):
        return None
    params: dict[str, str] = {}
    for segment, part in zip(pattern, parts, strict=True):
        if segment.is_param:
            if not part:
                return None
            params[segment.param_name or ""] = part
        elif segment.value != part:
            return None
    return params


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("/profile/:username", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/profile/ada")
        match.path_params  # {"username": "ada"}
    """

    __slots__ = ("_compiled", "_entries")

    def __init__(self) -> None:
        self._entries: list[tuple[Route, tuple[PathSegment, ...]]] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._entries.append((route, parse_path(route.path)))

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order."""
        return [route for route, _ in self._entries]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match an already-decoded request path.

        Raises ``NotFound`` if no route accepts the method and path.
        """
        return self.match_parts(method, split_path(path), path=path)

    def match_parts(
        self,
        method: str,
        parts: Sequence[str],
        *,
        path: str | None = None,
    ) -> RouteMatch:
        """Match pre-split request segments.

        ``HEAD`` requests also match ``GET`` routes.
        """
        accepted = {method, "GET"} if method == "HEAD" else {method}
        for route, pattern in self._entries:
            if route.methods.isdisjoint(accepted):
                continue
            params = match_segments(pattern, parts)
            if params is not None:
                return RouteMatch(route=route, path_params=params)

        shown = path if path is not None else "/" + "/".join(parts)
        raise NotFound(f"No route matches {method} {shown!r}")

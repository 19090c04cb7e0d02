"""URL-encoded form decoding.

Flat mode returns a ``FormData`` multi-value mapping. Extended mode
folds bracketed keys into nested structures::

    user[name]=ada&user[langs][]=py&user[langs][]=c
    -> {"user": {"name": "ada", "langs": ["py", "c"]}}

Both modes raise ``ValueError`` (or its ``UnicodeDecodeError`` subclass)
for bodies that are not valid UTF-8 form encodings; the body parser
middleware turns that into a 400.
"""

from typing import Any
from urllib.parse import parse_qsl

from sparrow.http.multidict import FormData


DEFAULT_DEPTH = 5


def parse_urlencoded(
    body: bytes,
    *,
    extended: bool = False,
    depth: int = DEFAULT_DEPTH,
) -> FormData | dict[str, Any]:
    """Decode an ``application/x-www-form-urlencoded`` body.

    In extended mode at most *depth* bracket groups nest; anything past
    that stays in the key of the deepest level.
    """
    pairs = parse_qsl(
        body.decode("utf-8"),
        keep_blank_values=True,
        encoding="utf-8",
        errors="strict",
    )
    if not extended:
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(key, []).append(value)
        return FormData(data)

    nested: dict[str, Any] = {}
    for key, value in pairs:
        _assign(nested, split_key(key, depth=depth), value)
    return nested


def split_key(key: str, *, depth: int = DEFAULT_DEPTH) -> list[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``.

    Only the first *depth* bracket groups are split off; the remainder
    is kept verbatim as one final part (``a[b][c]`` with ``depth=1``
    gives ``["a", "b", "[c]"]``). Keys that are not well-formed bracket
    paths are returned whole.
    """
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    parts = [head]
    rest = bracket + rest
    while rest.startswith("["):
        if len(parts) > depth:
            parts.append(rest)
            return parts
        close = rest.find("]")
        if close == -1:
            return [key]
        parts.append(rest[1:close])
        rest = rest[close + 1 :]
    if rest:
        return [key]
    return parts


def _assign(target: dict[str, Any], parts: list[str], value: str) -> None:
    """Store *value* at the path *parts*, walking down without recursion.

    Values never overwrite each other: when a key already holds
    something of another shape, the two are collected into a list.
    """
    node = target
    index = 0
    last = len(parts) - 1
    while index < last:
        key = parts[index]
        if parts[index + 1] == "":
            items = _list_at(node, key)
            if index + 1 == last:
                items.append(value)
                return
            child: dict[str, Any] = {}
            items.append(child)
            node = child
            index += 2
            continue
        node = _dict_at(node, key)
        index += 1

    key = parts[last]
    existing = node.get(key)
    if existing is None:
        node[key] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        # Repeated keys collect into a list
        node[key] = [existing, value]


def _list_at(node: dict[str, Any], key: str) -> list[Any]:
    existing = node.get(key)
    if isinstance(existing, list):
        return existing
    items: list[Any] = [] if existing is None else [existing]
    node[key] = items
    return items


def _dict_at(node: dict[str, Any], key: str) -> dict[str, Any]:
    existing = node.get(key)
    if isinstance(existing, dict):
        return existing
    child: dict[str, Any] = {}
    if existing is None:
        node[key] = child
    elif isinstance(existing, list):
        existing.append(child)
    else:
        node[key] = [existing, child]
    return child

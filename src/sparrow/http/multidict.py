"""Read-only multi-value string mappings.

``QueryParams`` (query string) and ``FormData`` (URL-encoded body) share
one implementation: a ``Mapping[str, str]`` that remembers every value
sent under a key.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class MultiDict(Mapping[str, str]):
    """Immutable ``key -> [values]`` store exposed as ``Mapping[str, str]``.

    ``__getitem__`` returns the first value for a key; ``get_list``
    returns all of them in the order they were sent.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", {k: list(v) for k, v in (data or {}).items()})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"{type(self).__name__}({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (repeated keys, checkboxes)."""
        return list(self._data.get(key, ()))

    def items_multi(self) -> Iterator[tuple[str, str]]:
        """Yield every ``(key, value)`` pair, repeated keys included."""
        for key, values in self._data.items():
            for value in values:
                yield key, value


class QueryParams(MultiDict):
    """Parsed query string. Keeps the raw bytes as ``raw``."""

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(parse_qs(query_string.decode("latin-1"), keep_blank_values=True))
        object.__setattr__(self, "_raw", query_string)

    @property
    def raw(self) -> bytes:
        """The undecoded query string."""
        return self._raw


class FormData(MultiDict):
    """Flat URL-encoded form fields.

    Usage::

        form = request.body          # after URLEncodedBodyParser(extended=False)
        name = form["name"]
        tags = form.get_list("tag")
    """

    __slots__ = ()

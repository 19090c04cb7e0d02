"""Immutable, case-insensitive request headers.

Built once from the raw ASGI header pairs; names are lower-cased and
values decoded as latin-1 at construction.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only header mapping keyed by lower-cased name.

    ``headers["Content-Type"]`` returns the first value sent.
    ``get_list`` returns every value sent under a name.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_dict(cls, values: Mapping[str, str]) -> "Headers":
        """Build headers from a plain ``name -> value`` mapping."""
        return cls(
            tuple((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in values.items())
        )

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._index.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The header byte pairs exactly as received."""
        return self._raw

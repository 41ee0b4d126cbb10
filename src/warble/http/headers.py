"""Immutable, case-insensitive HTTP request headers.

Implements ``Mapping[str, str]`` and the ``MultiValueMapping`` protocol.
Names are normalised once at construction, so lookups accept either the
HTTP spelling (``X-Api-Key``) or the CGI/WSGI environ spelling
(``HTTP_X_API_KEY``) that older routing DSLs use.
"""

from collections.abc import Iterable, Iterator, Mapping

_CGI_PREFIX = "http_"
# CGI exposes these two without the HTTP_ prefix
_CGI_UNPREFIXED = frozenset({"content_type", "content_length"})


def normalize_name(name: str) -> str:
    """Return the canonical lookup key for a header name.

    ``"Accept"``, ``"ACCEPT"`` and ``"HTTP_ACCEPT"`` all become ``"accept"``;
    ``"CONTENT_TYPE"`` becomes ``"content-type"``.
    """
    key = name.strip().lower()
    if "_" in key:
        if key.startswith(_CGI_PREFIX):
            key = key[len(_CGI_PREFIX) :]
        elif key not in _CGI_UNPREFIXED:
            return key
        key = key.replace("_", "-")
    return key


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first value for a name.
    ``get_list`` returns every value (repeated ``Accept`` lines, etc.).
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        data: dict[str, list[str]] = {}
        for name, value in raw:
            key = normalize_name(name.decode("latin-1"))
            data.setdefault(key, []).append(value.decode("latin-1"))
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_data", data)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "Headers":
        """Build headers from ``(name, value)`` string pairs."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in pairs
            )
        )

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> "Headers":
        """Build headers from a plain ``{name: value}`` mapping."""
        return cls.from_pairs(headers.items())

    def __getitem__(self, key: str) -> str:
        return self._data[normalize_name(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_name(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(normalize_name(key))
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(normalize_name(key), []))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Raw header byte pairs, as received from the ASGI scope."""
        return self._raw

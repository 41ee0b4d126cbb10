"""Immutable query string parameters."""

from urllib.parse import parse_qsl

from warble._internal.multimap import MultiDict


class QueryParams(MultiDict):
    """Query string parameters parsed once at request creation.

    Blank values are kept (``?flag=`` yields ``""``) so ``param("flag")``
    can tell "present but empty" from "missing".
    """

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes | str = b"") -> None:
        raw = query_string.encode("latin-1") if isinstance(query_string, str) else query_string
        pairs = parse_qsl(raw.decode("latin-1"), keep_blank_values=True)
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(key, []).append(value)
        super().__init__(data)
        object.__setattr__(self, "_raw", raw)

    @property
    def raw(self) -> bytes:
        """The undecoded query string."""
        return self._raw

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

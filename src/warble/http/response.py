"""HTTP responses.

Handlers build their answer incrementally on a mutable ``ResponseWriter``
(one per dispatch). When the dispatch finishes the writer is frozen into a
``Response``, which is what ``App.dispatch`` returns and the ASGI layer
sends.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """A finished HTTP response.

    Chain ``.with_*()`` calls to derive variants; each returns a new
    ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> "Response":
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header named *name* (case-insensitive)."""
        if name.lower() == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


class ResponseWriter:
    """Mutable response under construction, owned by one dispatch.

    Headers are addressed case-insensitively; ``Content-Type`` is kept in
    its own slot so ``accept()`` and handlers can overwrite it::

        c.res["Content-Type"] = "application/json"
        c.res.write('{"ok": true}')
    """

    __slots__ = ("_chunks", "_headers", "content_type", "status")

    def __init__(
        self,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        self.status = status
        self.content_type = content_type
        self._headers: dict[str, tuple[str, str]] = {}
        self._chunks: list[bytes] = []

    # -- Headers --

    def set_header(self, name: str, value: str) -> None:
        """Set (or replace) a header."""
        if name.lower() == "content-type":
            self.content_type = value
            return
        self._headers[name.lower()] = (name, value)

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value, or *default* if it is not set."""
        if name.lower() == "content-type":
            return self.content_type
        entry = self._headers.get(name.lower())
        return entry[1] if entry is not None else default

    def delete_header(self, name: str) -> None:
        """Remove a header if present."""
        self._headers.pop(name.lower(), None)

    def __getitem__(self, name: str) -> str | None:
        return self.get_header(name)

    def __setitem__(self, name: str, value: str) -> None:
        self.set_header(name, value)

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Headers set so far (without Content-Type)."""
        return tuple(self._headers.values())

    # -- Body --

    def write(self, data: str | bytes) -> int:
        """Append *data* to the body. Returns the number of bytes added."""
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        self._chunks.append(chunk)
        return len(chunk)

    @property
    def is_empty(self) -> bool:
        """True while nothing (or only empty strings) has been written."""
        return not any(self._chunks)

    @property
    def body(self) -> bytes:
        """The body written so far."""
        return b"".join(self._chunks)

    # -- Shortcuts --

    def redirect(self, target: str, status: int = 302) -> None:
        """Point the client at *target*.

        301 Moved Permanently, 302 Found, 303 See Other and
        307 Temporary Redirect are the usual choices.
        """
        self.status = status
        self.set_header("Location", target)

    def finish(self) -> Response:
        """Freeze the writer into a ``Response``."""
        return Response(
            body=self.body,
            status=self.status,
            content_type=self.content_type,
            headers=self.headers,
        )

    def __repr__(self) -> str:
        return f"<ResponseWriter {self.status} {len(self.body)} bytes>"

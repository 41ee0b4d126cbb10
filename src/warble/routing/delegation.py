"""Delegation escape — hand the whole request to another handler.

``Context.run(successor)`` raises ``Delegation``. It derives from
``BaseException`` so ``except Exception`` blocks in handler code never
swallow it, and it is tagged with the context that raised it: only the
dispatch root owning that context catches it, every other layer lets it
through.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from warble.app import App
    from warble.context import Context
    from warble.http.request import Request

Successor: TypeAlias = "App | Callable[[Request], Any]"


class Delegation(BaseException):  # noqa: N818 — a control signal, not an error
    """Unwinds a dispatch so its root can re-dispatch to *successor*."""

    def __init__(self, owner: "Context", successor: Successor) -> None:
        super().__init__(successor)
        self.owner = owner
        self.successor = successor

    def __repr__(self) -> str:
        return f"Delegation(successor={self.successor!r})"

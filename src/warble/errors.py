"""Warble exception hierarchy.

Shared across the matching engine, the dispatch root and the ASGI layer
so every module raises and catches the same types.

Predicate failure is not an exception: a failed attempt simply returns.
The delegation escape is not an error either; it lives in
``warble.routing.delegation``.
"""

from dataclasses import dataclass


class WarbleError(Exception):
    """Base for all warble-specific errors."""


class ConfigurationError(WarbleError):
    """Raised when an app or its configuration is invalid.

    Typically raised while constructing ``App`` or ``AppConfig``.
    """


class DelegationError(WarbleError):
    """Raised when a delegation escape cannot be honoured.

    Covers ``run()`` outside a dispatch, a second escape from a context
    that already escaped, and delegation chains longer than
    ``AppConfig.max_delegations``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WarbleError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers. The matching engine lets it propagate like any
    other handler error; the ASGI handler turns it into a response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

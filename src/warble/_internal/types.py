"""Shared type aliases used across warble modules."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from warble.context import Context

# Handler body — receives the per-request Context, writes into ctx.res
Body: TypeAlias = Callable[["Context"], Any]

# Matched handler — called with the attempt's captures as positional args
Handler: TypeAlias = Callable[..., Any]

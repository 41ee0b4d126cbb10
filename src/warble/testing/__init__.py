"""Test utilities for warble applications.

``build_request`` makes a ``Request`` for synchronous ``app.dispatch``
tests; ``TestClient`` drives the ASGI interface end to end::

    from warble.testing import TestClient, build_request
"""

from warble.testing.client import TestClient
from warble.testing.factories import build_request

__all__ = [
    "TestClient",
    "build_request",
]

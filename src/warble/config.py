"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, safe to share
between every concurrent dispatch of the same app.
"""

from dataclasses import dataclass

from warble.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, max_delegations=3)
    """

    debug: bool = False

    # Responses
    default_status: int = 200
    default_content_type: str = "text/html; charset=utf-8"
    not_found_status: int = 404

    # Delegation — how many successive run() hand-offs one request may take
    max_delegations: int = 10

    # ASGI — run each dispatch in a worker thread (anyio.to_thread)
    threaded_dispatch: bool = True

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    def __post_init__(self) -> None:
        for name in ("default_status", "not_found_status"):
            value = getattr(self, name)
            if not 100 <= value <= 599:
                msg = f"AppConfig.{name} must be an HTTP status code, got {value!r}"
                raise ConfigurationError(msg)
        if self.max_delegations < 0:
            msg = f"AppConfig.max_delegations must be >= 0, got {self.max_delegations!r}"
            raise ConfigurationError(msg)
        if self.max_content_length <= 0:
            msg = (
                "AppConfig.max_content_length must be positive, "
                f"got {self.max_content_length!r}"
            )
            raise ConfigurationError(msg)

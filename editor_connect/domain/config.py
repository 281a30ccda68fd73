"""Config domain models for editor-connect.

Session options may come from keyword arguments or a mapping. This module
defines the validated representation shared by both.
"""

import math
from dataclasses import dataclass, fields
from typing import Any

from editor_connect.domain.exceptions import InvalidPortError

PLUGIN_NAME = "editor-connect"
PLUGIN_DISPLAY_NAME = "Editor"

DEFAULT_HOST = "127.0.0.1"

RECONNECTION_DELAY = 2000
"""Milliseconds to wait before each reconnection attempt."""

RECONNECTION_ATTEMPTS = 10
"""Maximum number of attempts in one reconnection campaign."""


def validate_port(port: Any) -> None:
    """Check that a port is a finite number.

    Args:
        port: Value supplied by the caller.

    Raises:
        InvalidPortError: If port is not an int/float or is NaN/infinite.
    """
    if isinstance(port, bool) or not isinstance(port, int | float) or not math.isfinite(port):
        raise InvalidPortError(
            f"{PLUGIN_NAME}: invalid port specified, got {port!r}",
            hint="Pass the numeric TCP port the editor is listening on",
        )


@dataclass(frozen=True)
class ReconnectionPolicy:
    """Fixed-delay reconnection policy.

    Attributes:
        enabled: Whether unsolicited disconnects trigger reconnection.
        delay_ms: Delay before every attempt, in milliseconds.
        max_attempts: Attempts allowed per reconnection campaign.

    Raises:
        ValueError: If delay_ms or max_attempts is negative.
    """

    enabled: bool = False
    delay_ms: int = RECONNECTION_DELAY
    max_attempts: int = RECONNECTION_ATTEMPTS

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms cannot be negative, got {self.delay_ms}")
        if self.max_attempts < 0:
            raise ValueError(
                f"max_attempts cannot be negative, got {self.max_attempts}"
            )


@dataclass(frozen=True)
class SessionOptions:
    """Construction parameters for an editor session.

    Attributes:
        port: TCP port of the editor (required).
        host: Host to connect to (default: loopback).
        name: Label appended to the logger name, never transmitted.
        logging_level: One of debug, info, warn, error, silent.
        auto_connect: Connect on the next loop turn after construction.
        reconnection: Reconnect after unsolicited disconnects.
        reconnection_delay: Milliseconds between reconnection attempts.
        reconnection_attempts: Attempts allowed per reconnection campaign.

    Raises:
        InvalidPortError: If port is not a finite number.
        ValueError: If reconnection values are negative.
    """

    port: int
    host: str = DEFAULT_HOST
    name: str = ""
    logging_level: str = "info"
    auto_connect: bool = True
    reconnection: bool = True
    reconnection_delay: int = RECONNECTION_DELAY
    reconnection_attempts: int = RECONNECTION_ATTEMPTS

    def __post_init__(self) -> None:
        """Validate session options after initialization."""
        validate_port(self.port)
        # Raises ValueError for negative delay/attempts
        self.reconnection_policy()

    def reconnection_policy(self) -> ReconnectionPolicy:
        """Return the reconnection policy described by these options."""
        return ReconnectionPolicy(
            enabled=self.reconnection,
            delay_ms=self.reconnection_delay,
            max_attempts=self.reconnection_attempts,
        )

    def as_kwargs(self) -> dict[str, Any]:
        """Return the options as keyword arguments for ``EditorSession.init``."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def from_mapping(data: dict[str, Any]) -> "SessionOptions":
        """Build options from a mapping, ignoring unknown keys.

        Raises:
            InvalidPortError: If ``port`` is missing or not a finite number.
            ValueError: If reconnection values are negative.
        """
        if "port" not in data:
            raise InvalidPortError(
                f"{PLUGIN_NAME}: no port specified",
                hint="Set 'port' to the TCP port the editor is listening on",
            )
        known = {f.name for f in fields(SessionOptions)}
        return SessionOptions(**{key: value for key, value in data.items() if key in known})

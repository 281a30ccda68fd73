"""Unit tests for config domain models."""

import math

import pytest

from editor_connect.domain.config import (
    ReconnectionPolicy,
    SessionOptions,
    validate_port,
)
from editor_connect.domain.exceptions import InvalidPortError


class TestValidatePort:
    """Tests for validate_port."""

    @pytest.mark.parametrize("port", [35048, 0, 1.0, 65535])
    def test_finite_numbers_are_accepted(self, port: object) -> None:
        # Should not raise
        validate_port(port)

    @pytest.mark.parametrize(
        "port", ["35048", None, math.nan, math.inf, -math.inf, True, False, {}]
    )
    def test_invalid_ports_raise(self, port: object) -> None:
        with pytest.raises(InvalidPortError, match="invalid port specified"):
            validate_port(port)

    def test_error_carries_hint(self) -> None:
        with pytest.raises(InvalidPortError) as exc_info:
            validate_port(None)

        assert exc_info.value.hint


class TestReconnectionPolicy:
    """Tests for ReconnectionPolicy."""

    def test_defaults(self) -> None:
        policy = ReconnectionPolicy()

        assert policy.enabled is False
        assert policy.delay_ms == 2000
        assert policy.max_attempts == 10

    def test_negative_delay_raises(self) -> None:
        with pytest.raises(ValueError, match="delay_ms cannot be negative"):
            ReconnectionPolicy(delay_ms=-1)

    def test_negative_attempts_raise(self) -> None:
        with pytest.raises(ValueError, match="max_attempts cannot be negative"):
            ReconnectionPolicy(max_attempts=-1)

    def test_zero_attempts_allowed(self) -> None:
        assert ReconnectionPolicy(enabled=True, max_attempts=0).max_attempts == 0


class TestSessionOptions:
    """Tests for SessionOptions."""

    def test_defaults(self) -> None:
        options = SessionOptions(port=35048)

        assert options.host == "127.0.0.1"
        assert options.name == ""
        assert options.logging_level == "info"
        assert options.auto_connect is True
        assert options.reconnection is True
        assert options.reconnection_delay == 2000
        assert options.reconnection_attempts == 10

    def test_invalid_port_raises(self) -> None:
        with pytest.raises(InvalidPortError):
            SessionOptions(port="35048")

    def test_negative_reconnection_values_raise(self) -> None:
        with pytest.raises(ValueError):
            SessionOptions(port=35048, reconnection_delay=-5)

    def test_reconnection_policy(self) -> None:
        options = SessionOptions(
            port=35048, reconnection=False, reconnection_delay=10, reconnection_attempts=2
        )

        assert options.reconnection_policy() == ReconnectionPolicy(
            enabled=False, delay_ms=10, max_attempts=2
        )

    def test_as_kwargs_round_trips(self) -> None:
        options = SessionOptions(port=35048, name="subl", logging_level="debug")

        assert SessionOptions(**options.as_kwargs()) == options

    def test_frozen(self) -> None:
        options = SessionOptions(port=35048)

        with pytest.raises(AttributeError):
            options.port = 1  # type: ignore[misc]


class TestFromMapping:
    """Tests for SessionOptions.from_mapping."""

    def test_unknown_keys_are_ignored(self) -> None:
        options = SessionOptions.from_mapping({"port": 35048, "colour": "blue"})

        assert options.port == 35048

    def test_missing_port_raises(self) -> None:
        with pytest.raises(InvalidPortError, match="no port specified"):
            SessionOptions.from_mapping({"host": "localhost"})

    def test_values_are_applied(self) -> None:
        options = SessionOptions.from_mapping(
            {"port": 4000, "host": "localhost", "reconnection": False}
        )

        assert options.host == "localhost"
        assert options.reconnection is False

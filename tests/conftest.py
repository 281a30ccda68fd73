"""Pytest configuration and shared fixtures."""

import logging

import pytest

from editor_connect.shared.log import ROOT_LOGGER_NAME
from tests.helpers import unused_port


@pytest.fixture
def closed_port() -> int:
    """A loopback port nothing listens on, so connecting is refused."""
    return unused_port()


@pytest.fixture
def test_logger() -> logging.Logger:
    """Logger for connectors built directly in tests."""
    log = logging.getLogger(f"{ROOT_LOGGER_NAME}.tests")
    log.setLevel(logging.DEBUG)
    return log


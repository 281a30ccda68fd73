"""Test helper utilities for the editor-connect test suite."""

from tests.helpers.fake_editor import (
    FakeEditor,
    unused_port,
    wait_for_event,
    wait_until,
)

__all__ = [
    "FakeEditor",
    "unused_port",
    "wait_for_event",
    "wait_until",
]

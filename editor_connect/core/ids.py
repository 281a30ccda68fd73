"""Identifier generation for plugins and editor sessions."""

import uuid


def create_uid() -> str:
    """Return a random RFC 4122 version 4 identifier as a string."""
    return str(uuid.uuid4())

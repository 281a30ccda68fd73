"""Report build errors to a running text editor over TCP.

Usage:
    import editor_connect

    async def main():
        editor = editor_connect.create({"port": 35048, "name": "subl"})
        editor.on("message", print)
        editor.show_error(err, "sass")
"""

from collections.abc import Mapping
from typing import Any

from editor_connect.adapters.connector import Connector, JsonLineParser, ProtocolError
from editor_connect.core.editor import EditorSession
from editor_connect.core.events import EventEmitter
from editor_connect.core.ids import create_uid
from editor_connect.domain.config import PLUGIN_NAME, SessionOptions
from editor_connect.domain.entities import ConnectionState
from editor_connect.domain.exceptions import (
    EditorConnectError,
    InvalidOptionsError,
    InvalidPortError,
    MissingLoggerError,
)


def create(options: Mapping[str, Any] | SessionOptions, **kwargs: Any) -> EditorSession:
    """Create an editor session that connects and reconnects automatically.

    Args:
        options: SessionOptions, or a mapping with at least ``port`` and
            optionally ``host`` (default 127.0.0.1), ``name`` and the other
            SessionOptions fields.
        **kwargs: Passed to ``EditorSession.init`` (e.g. ``plugin_id``,
            ``loop``).

    Returns:
        Initialized EditorSession.

    Raises:
        InvalidOptionsError: If options is not a mapping or SessionOptions.
        InvalidPortError: If the port is missing or not a finite number.
    """
    if isinstance(options, SessionOptions):
        session_options = options
    elif isinstance(options, Mapping):
        session_options = SessionOptions.from_mapping(dict(options))
    else:
        raise InvalidOptionsError(
            f"{PLUGIN_NAME}: options is not a mapping, got {type(options).__name__}"
        )

    return EditorSession.create(**session_options.as_kwargs(), **kwargs)


__all__ = [
    "ConnectionState",
    "Connector",
    "EditorConnectError",
    "EditorSession",
    "EventEmitter",
    "InvalidOptionsError",
    "InvalidPortError",
    "JsonLineParser",
    "MissingLoggerError",
    "ProtocolError",
    "SessionOptions",
    "create",
    "create_uid",
]

"""Core domain entities for editor-connect.

Defines the connection lifecycle states and the envelopes exchanged with the
editor over the socket.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any

from editor_connect.domain.config import PLUGIN_NAME

ALL_VIEWS = "<all>"
"""View selector matching every view the editor has open."""

SHOW_ERROR = "ShowError"
ERASE_ERROR = "EraseError"


class ConnectionState(str, Enum):
    """Lifecycle of a connector's socket.

    Disconnected -> Connecting -> Connected -> Disconnecting -> Disconnected
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


def build_handshake(plugin_id: str, editor_id: str | None = None) -> dict[str, Any]:
    """Build the handshake envelope sent after every successful connect.

    Args:
        plugin_id: Identifier of the build process sending commands.
        editor_id: Session identifier, included when known.

    Returns:
        Handshake envelope ready for encoding.
    """
    handshake: dict[str, Any] = {
        "name": PLUGIN_NAME,
        "handshake": True,
        "pluginId": plugin_id,
        "data": {},
    }
    if editor_id is not None:
        handshake["editorId"] = editor_id
    return handshake


@dataclass(frozen=True)
class NormalizedError:
    """Build error reduced to the fields an editor needs to place a marker.

    Attributes:
        plugin_name: Tool that reported the error, or the task name.
        file: Full path of the offending file ("" when unknown).
        line: 1-based line number, if known.
        column: Column number, if known.
        message: Error message, truncated to a bounded length.
    """

    plugin_name: str | None
    file: str
    line: int | None
    column: int | None
    message: str | None

    @property
    def has_file(self) -> bool:
        """Whether the error points at a file."""
        return bool(self.file)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the key names the editor side expects."""
        path = PurePath(self.file)
        return {
            "hasFile": self.has_file,
            "plugin_name": self.plugin_name,
            "file_path": str(path.parent) if self.file else "",
            "file_name": path.name,
            "file_base_name": path.stem,
            "file_extension": path.suffix,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }

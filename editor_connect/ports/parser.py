"""Parser port interface for wire framing.

Defines the codec a Connector uses to turn values into frames and socket
reads back into values.
"""

from typing import Any, Protocol


class Parser(Protocol):
    """Protocol for frame codecs.

    ``decode`` is stateless. ``feed`` may buffer an incomplete trailing frame
    between calls until ``reset`` is called.
    """

    def encode(self, data: Any) -> bytes:
        """Serialize a value into one frame.

        Args:
            data: JSON-serializable value.

        Returns:
            The frame bytes, terminator included.
        """
        ...

    def decode(self, data: bytes | str) -> list[Any]:
        """Decode every frame contained in ``data``.

        Args:
            data: Raw bytes or text holding zero or more whole frames.

        Returns:
            Decoded values in wire order.

        Raises:
            ProtocolError: If a frame cannot be decoded.
        """
        ...

    def feed(self, data: bytes) -> list[Any]:
        """Decode the complete frames available after appending ``data``."""
        ...

    def reset(self) -> None:
        """Discard any buffered partial frame."""
        ...

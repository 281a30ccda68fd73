"""Newline-delimited JSON framing for the editor socket.

Each logical message is ``json.dumps(value) + "\\n"`` encoded as UTF-8. JSON
encoding escapes newlines inside strings, so the delimiter never appears
inside a frame.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

END_OF_MESSAGE = b"\n"


class ProtocolError(Exception):
    """Raised when a received frame is not valid JSON."""

    pass


class JsonLineParser:
    """Codec for newline-delimited JSON frames.

    ``encode`` and ``decode`` are stateless. ``feed`` keeps the bytes of an
    incomplete trailing frame until the rest of it arrives, so a frame split
    across two socket reads is decoded once, whole.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._buffer = b""

    def encode(self, data: Any) -> bytes:
        """Serialize a value into a newline-terminated frame.

        Raises:
            TypeError: If data is not JSON-serializable.
            ValueError: If data contains a circular reference.
        """
        return json.dumps(data).encode(self.encoding) + END_OF_MESSAGE

    def decode(self, data: bytes | str) -> list[Any]:
        """Decode every frame in ``data``, skipping empty segments.

        Args:
            data: Raw bytes or text containing whole frames.

        Returns:
            Decoded values in the order they appeared.

        Raises:
            ProtocolError: If any segment is not valid JSON.
        """
        if isinstance(data, bytes):
            try:
                data = data.decode(self.encoding)
            except UnicodeDecodeError as e:
                raise ProtocolError(f"Invalid {self.encoding} frame: {e}") from e

        messages = []
        for segment in data.split("\n"):
            if not segment:
                continue
            try:
                messages.append(json.loads(segment))
            except json.JSONDecodeError as e:
                raise ProtocolError(f"Invalid JSON frame: {e}") from e
        return messages

    def feed(self, data: bytes) -> list[Any]:
        """Buffer a socket read and decode the frames it completes.

        Args:
            data: Bytes from one socket read.

        Returns:
            Decoded values of every frame completed by this read, possibly
            empty.

        Raises:
            ProtocolError: If a completed frame is not valid JSON. The
                completed bytes are discarded; a trailing partial frame is
                kept.
        """
        self._buffer += data
        complete, sep, partial = self._buffer.rpartition(END_OF_MESSAGE)
        if not sep:
            return []

        self._buffer = partial
        return self.decode(complete)

    def reset(self) -> None:
        """Discard any partial frame left over from a previous connection."""
        if self._buffer:
            logger.debug("Discarding %d buffered bytes", len(self._buffer))
        self._buffer = b""

    @property
    def pending(self) -> int:
        """Number of buffered bytes waiting for a frame terminator."""
        return len(self._buffer)

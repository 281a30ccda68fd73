"""Socket transport for the editor protocol.

Architecture:
- protocol.py: newline-delimited JSON framing
- connector.py: connection state machine with bounded reconnection
"""

from editor_connect.adapters.connector.connector import Connector
from editor_connect.adapters.connector.protocol import JsonLineParser, ProtocolError

__all__ = ["Connector", "JsonLineParser", "ProtocolError"]

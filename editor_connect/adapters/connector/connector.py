"""Socket connector with automatic, bounded reconnection.

The connector owns at most one TCP transport at a time and drives it through
the ConnectionState lifecycle. Everything runs on a single asyncio event
loop: socket callbacks, the deferred auto-connect and reconnection timers are
all serialized loop turns, so no locking is needed.

Events emitted:
    connect: The socket connected.
    close(caused_by_error): The socket closed; state is Disconnected.
    data(messages): One socket read decoded into a list of messages.
    error(exc): A transport failure or a malformed frame.
    reconnect_attempt(attempt): A reconnection attempt is starting.
"""

import asyncio
import functools
import logging
from typing import Any

from editor_connect.adapters.connector.protocol import JsonLineParser, ProtocolError
from editor_connect.core.events import EventEmitter
from editor_connect.domain.config import (
    DEFAULT_HOST,
    RECONNECTION_ATTEMPTS,
    RECONNECTION_DELAY,
    ReconnectionPolicy,
    validate_port,
)
from editor_connect.domain.entities import ConnectionState
from editor_connect.domain.exceptions import MissingLoggerError
from editor_connect.ports.logger import Logger
from editor_connect.ports.parser import Parser

logger = logging.getLogger(__name__)


class _SocketProtocol(asyncio.Protocol):
    """Forwards transport callbacks to the connector that created it."""

    def __init__(self, connector: "Connector") -> None:
        self._connector = connector

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._connector._on_socket_connect(self, transport)

    def data_received(self, data: bytes) -> None:
        self._connector._on_socket_data(self, data)

    def connection_lost(self, exc: Exception | None) -> None:
        self._connector._on_socket_close(self, exc)


class Connector(EventEmitter):
    """Manages a socket connection that reconnects after being dropped.

    Created in two phases: ``Connector()`` builds an unconfigured instance
    whose accessors may already be used, ``init(...)`` configures it.

    Example:
        connector = Connector().init(port=35048, logger=log)
        connector.on("data", handle_messages)
    """

    def __init__(self) -> None:
        super().__init__()
        self.log: Logger | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._host = DEFAULT_HOST
        self._port: int | float | None = None
        self._parser: Parser = JsonLineParser()
        self._policy = ReconnectionPolicy()
        self._attempts = 0
        self._should_reconnect = False
        self._state = ConnectionState.DISCONNECTED
        self._transport: asyncio.Transport | None = None
        self._protocol: _SocketProtocol | None = None
        self._connect_task: asyncio.Task | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None

    def init(
        self,
        *,
        port: Any,
        logger: Logger | None,
        host: str | None = DEFAULT_HOST,
        reconnection: bool = False,
        reconnection_delay: int = RECONNECTION_DELAY,
        reconnection_attempts: int = RECONNECTION_ATTEMPTS,
        auto_connect: bool = True,
        parser: Parser | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "Connector":
        """Configure the connector.

        Args:
            port: TCP port to connect to.
            logger: Logger used for connector messages.
            host: Host to connect to (default: loopback).
            reconnection: Reconnect after the server drops the connection.
            reconnection_delay: Milliseconds to wait before each attempt.
            reconnection_attempts: Attempts allowed per reconnection campaign.
            auto_connect: Call ``connect`` on the next loop turn, which leaves
                the caller time to finish configuring this instance.
            parser: Frame codec (default: a new JsonLineParser).
            loop: Event loop to run on (default: the running loop).

        Returns:
            This connector.

        Raises:
            InvalidPortError: If port is not a finite number.
            MissingLoggerError: If no logger was passed.
            RuntimeError: If no loop was passed and none is running.
        """
        validate_port(port)
        if logger is None:
            raise MissingLoggerError(
                "Logger was not passed",
                hint="Pass a logger created with editor_connect.shared.log.create_logger",
            )

        self._loop = loop or asyncio.get_running_loop()
        self.log = logger
        self._host = host or DEFAULT_HOST
        self._port = port
        self._parser = parser or JsonLineParser()
        self._policy = ReconnectionPolicy(
            enabled=reconnection,
            delay_ms=reconnection_delay,
            max_attempts=reconnection_attempts,
        )
        self._attempts = 0
        self._should_reconnect = False
        self._state = ConnectionState.DISCONNECTED

        if auto_connect:
            self._loop.call_soon(self.connect)

        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Open a new socket. Does nothing unless Disconnected."""
        if self._state is not ConnectionState.DISCONNECTED:
            return
        if self._loop is None:
            raise RuntimeError("Connector.init() must be called before connect()")

        self._cancel_reconnect()
        self._parser.reset()
        protocol = _SocketProtocol(self)
        self._protocol = protocol
        self._should_reconnect = True
        self._state = ConnectionState.CONNECTING
        task = self._loop.create_task(
            self._loop.create_connection(lambda: protocol, self._host, int(self._port))
        )
        task.add_done_callback(functools.partial(self._on_connect_done, protocol))
        self._connect_task = task

    def close(self) -> None:
        """Close the socket and cancel any future reconnection.

        Ignored when already Disconnected or Disconnecting. The transition to
        Disconnected completes when the transport reports the close.
        """
        self._should_reconnect = False
        self._cancel_reconnect()

        if self._state in (ConnectionState.DISCONNECTED, ConnectionState.DISCONNECTING):
            return

        self._state = ConnectionState.DISCONNECTING
        if self._transport is not None:
            self._transport.abort()
        elif self._connect_task is not None:
            self._connect_task.cancel()

    def send(self, data: Any) -> "Connector":
        """Write a frame if Connected; otherwise the data is dropped."""
        if self._state is ConnectionState.CONNECTED and self._transport is not None:
            self._transport.write(self._parser.encode(data))
        return self

    def _on_connect_done(self, protocol: _SocketProtocol, task: asyncio.Task) -> None:
        if self._connect_task is task:
            self._connect_task = None

        if task.cancelled():
            # close() gave up on the attempt before the socket connected
            self._handle_close(protocol, caused_by_error=False)
            return

        exc = task.exception()
        if exc is not None:
            if protocol is self._protocol:
                self.emit("error", exc)
            self._handle_close(protocol, caused_by_error=True)

    # ------------------------------------------------------------------
    # Socket callbacks
    # ------------------------------------------------------------------

    def _on_socket_connect(
        self, protocol: _SocketProtocol, transport: asyncio.BaseTransport
    ) -> None:
        if protocol is not self._protocol or self._state is ConnectionState.DISCONNECTING:
            transport.abort()
            return

        self._transport = transport
        self._state = ConnectionState.CONNECTED
        self._attempts = 0
        self.emit("connect")

    def _on_socket_data(self, protocol: _SocketProtocol, data: bytes) -> None:
        if protocol is not self._protocol:
            return

        try:
            messages = self._parser.feed(data)
        except ProtocolError as e:
            self.log.warning("Dropping malformed frame: %s", e)
            self.emit("error", e)
            return

        if messages:
            self.emit("data", messages)

    def _on_socket_close(self, protocol: _SocketProtocol, exc: Exception | None) -> None:
        if exc is not None and protocol is self._protocol:
            self.emit("error", exc)
        self._handle_close(protocol, caused_by_error=exc is not None)

    def _handle_close(self, protocol: _SocketProtocol, caused_by_error: bool) -> None:
        # Each socket closes exactly once; late callbacks from an old socket are ignored
        if protocol is not self._protocol:
            return

        self._protocol = None
        self._transport = None
        self._state = ConnectionState.DISCONNECTED
        self.emit("close", caused_by_error)

        if self._should_reconnect:
            self._reconnect()

    # ------------------------------------------------------------------
    # Reconnection
    # ------------------------------------------------------------------

    def _reconnect(self) -> None:
        """Schedule the next attempt of the current reconnection campaign."""
        policy = self._policy
        if not policy.enabled:
            return

        if self._attempts < policy.max_attempts:
            self._reconnect_handle = self._loop.call_later(
                policy.delay_ms / 1000, self._attempt_reconnect
            )
        else:
            self.log.info(
                "Disconnected after %d reconnection attempts", self._attempts
            )

    def _attempt_reconnect(self) -> None:
        self._reconnect_handle = None
        self._attempts += 1
        self.emit("reconnect_attempt", self._attempts)
        self.connect()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
            logger.debug("Cancelled pending reconnection attempt")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def ready_state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def attempts(self) -> int:
        """Attempts made in the current reconnection campaign."""
        return self._attempts

    @property
    def transport(self) -> asyncio.Transport | None:
        """The live transport, or None when not connected."""
        return self._transport

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int | float | None:
        return self._port

    @property
    def parser(self) -> Parser:
        return self._parser

    @parser.setter
    def parser(self, parser: Parser) -> None:
        self._parser = parser

    @property
    def reconnection(self) -> bool:
        return self._policy.enabled

    @reconnection.setter
    def reconnection(self, enabled: bool) -> None:
        self._policy = ReconnectionPolicy(
            enabled=enabled,
            delay_ms=self._policy.delay_ms,
            max_attempts=self._policy.max_attempts,
        )

    @property
    def reconnection_delay(self) -> int:
        """Milliseconds waited before each reconnection attempt."""
        return self._policy.delay_ms

    @reconnection_delay.setter
    def reconnection_delay(self, delay_ms: int) -> None:
        self._policy = ReconnectionPolicy(
            enabled=self._policy.enabled,
            delay_ms=delay_ms,
            max_attempts=self._policy.max_attempts,
        )

    @property
    def reconnection_attempts(self) -> int:
        """Attempts allowed per reconnection campaign."""
        return self._policy.max_attempts

    @reconnection_attempts.setter
    def reconnection_attempts(self, attempts: int) -> None:
        self._policy = ReconnectionPolicy(
            enabled=self._policy.enabled,
            delay_ms=self._policy.delay_ms,
            max_attempts=attempts,
        )

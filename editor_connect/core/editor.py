"""Editor session: handshake and command protocol over a Connector.

An EditorSession pairs one Connector with the editor-connect protocol:

1. After every socket connect the session sends a handshake envelope.
2. The first message received must be a valid handshake reply; until then
   nothing from the editor is trusted. An invalid reply closes the socket.
3. Once the handshake completed, every received message is re-emitted as a
   ``message`` event on its own loop turn.

Outgoing commands all go through ``run``, which tags them with the plugin
and session identifiers.

Events emitted:
    connect, close(caused_by_error), error(exc), reconnect_attempt(n),
    invalid_handshake(message), message(message), run(envelope)
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from editor_connect.adapters.connector.connector import Connector
from editor_connect.core.errors import normalize_error, serialize_error
from editor_connect.core.events import EventEmitter
from editor_connect.core.ids import create_uid
from editor_connect.domain.config import (
    DEFAULT_HOST,
    PLUGIN_DISPLAY_NAME,
    RECONNECTION_ATTEMPTS,
    RECONNECTION_DELAY,
    validate_port,
)
from editor_connect.domain.entities import (
    ALL_VIEWS,
    ERASE_ERROR,
    SHOW_ERROR,
    build_handshake,
)
from editor_connect.ports.task_hook import TASK_START_EVENT, TaskHook
from editor_connect.shared.log import create_logger, set_logging_level


class EditorSession(EventEmitter):
    """Client side of one editor endpoint.

    Use ``EditorSession.create(port=...)``, or build an empty session and
    call ``init`` on it.

    Attributes:
        id: Session identifier, sent as ``editorId``.
        plugin_id: Identifier of the build process, sent as ``pluginId``.
        name: Optional label used in the logger name.
        log: Session logger.
        connector: The owned Connector.
    """

    def __init__(self) -> None:
        super().__init__()
        self.id: str | None = None
        self.plugin_id: str | None = None
        self.name = ""
        self.log: logging.Logger | None = None
        self.connector: Connector | None = None
        self._is_handshake_complete = False
        self._task_hook: TaskHook | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def create(cls, **options: Any) -> "EditorSession":
        """Create and initialize a session. See ``init`` for the options."""
        return cls().init(**options)

    def init(
        self,
        *,
        port: Any,
        host: str = DEFAULT_HOST,
        name: str = "",
        logging_level: str = "info",
        auto_connect: bool = True,
        reconnection: bool = True,
        reconnection_delay: int = RECONNECTION_DELAY,
        reconnection_attempts: int = RECONNECTION_ATTEMPTS,
        plugin_id: str | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "EditorSession":
        """Configure the session and its connector.

        Args:
            port: TCP port of the editor.
            host: Host of the editor (default: loopback).
            name: Label appended to the logger name.
            logging_level: debug, info, warn, error or silent.
            auto_connect: Connect on the next loop turn.
            reconnection: Reconnect after unsolicited disconnects.
            reconnection_delay: Milliseconds between reconnection attempts.
            reconnection_attempts: Attempts per reconnection campaign.
            plugin_id: Identifier shared by every session of this build
                process. A new one is generated when omitted.
            loop: Event loop to run on (default: the running loop).

        Returns:
            This session.

        Raises:
            InvalidPortError: If port is not a finite number.
            ValueError: If logging_level is unknown.
        """
        validate_port(port)

        session_id = create_uid()
        logger_name = PLUGIN_DISPLAY_NAME
        if isinstance(name, str) and name:
            logger_name = f"{PLUGIN_DISPLAY_NAME}:{name}"
        # Each session owns its logger and level
        log = create_logger(f"{logger_name}.{session_id}", logging_level)

        self._loop = loop or asyncio.get_running_loop()
        connector = Connector().init(
            host=host,
            port=port,
            reconnection=reconnection,
            reconnection_delay=reconnection_delay,
            reconnection_attempts=reconnection_attempts,
            auto_connect=auto_connect,
            logger=log,
            loop=self._loop,
        )

        connector.on("connect", self._on_socket_connect)
        connector.on("close", self._on_socket_close)
        connector.on("error", self._on_socket_error)
        connector.on("data", self._on_socket_data)
        connector.on("reconnect_attempt", self._on_socket_reconnect_attempt)

        self.id = session_id
        self.plugin_id = plugin_id or create_uid()
        self.log = log
        self.connector = connector
        self.name = name
        self._is_handshake_complete = False

        return self

    def configure(self, options: Mapping[str, Any] | None = None) -> "EditorSession":
        """Change runtime options.

        Args:
            options: Mapping with optional keys:
                task_hook: Build-tool object publishing ``task_start``;
                    replaces any hook configured before.
                logging_level: New level name for the session logger.

        Returns:
            This session. Non-mapping options are ignored.
        """
        if not isinstance(options, Mapping):
            return self

        task_hook = options.get("task_hook")
        logging_level = options.get("logging_level")

        if task_hook is not None:
            if self._task_hook is not None:
                self._task_hook.remove_listener(TASK_START_EVENT, self._on_task_start)
            # remove first so configuring the same hook twice registers once
            task_hook.remove_listener(TASK_START_EVENT, self._on_task_start)
            task_hook.on(TASK_START_EVENT, self._on_task_start)
            self._task_hook = task_hook

        if isinstance(logging_level, str):
            set_logging_level(self.log, logging_level)

        return self

    @property
    def is_handshake_complete(self) -> bool:
        """Whether the editor answered the handshake of the current socket."""
        return self._is_handshake_complete

    def connect(self) -> "EditorSession":
        self.connector.connect()
        return self

    def close(self) -> "EditorSession":
        self.connector.close()
        return self

    def send(self, data: Any) -> "EditorSession":
        self.connector.send(data)
        return self

    def run(self, command: Mapping[str, Any]) -> "EditorSession":
        """Send a command to the editor.

        The command is copied, its ``task`` (if any) is suffixed with
        ``#<plugin_id>`` so build files with identical task names do not
        clash, and it is stamped with ``pluginId`` and ``editorId``.

        Args:
            command: Command envelope with at least ``name``.

        Returns:
            This session.
        """
        envelope = dict(command)
        if "task" in envelope:
            envelope["task"] = f"{envelope['task']}#{self.plugin_id}"

        envelope["pluginId"] = self.plugin_id
        envelope["editorId"] = self.id
        self.connector.send(envelope)
        self.emit("run", envelope)
        return self

    def show_error(self, err: Any, task_name: str) -> "EditorSession":
        """Show a build error in the editor.

        Args:
            err: Exception or mapping describing the error.
            task_name: Build task the error belongs to.

        Returns:
            This session. Nothing is sent if task_name is not a string.
        """
        if not isinstance(task_name, str):
            self.log.error(
                "The task name provided is not of type str, got %r", task_name
            )
            return self

        error = normalize_error(err, task_name)
        command = {
            "name": SHOW_ERROR,
            "task": task_name,
            "views": [error.file],
            "data": {
                "error": error.to_dict(),
                "originalError": serialize_error(err),
            },
        }
        return self.run(command)

    def erase_error(self, task_name: str) -> "EditorSession":
        """Remove the errors shown for a task in every view.

        Returns:
            This session. Nothing is sent if task_name is not a string.
        """
        if not isinstance(task_name, str):
            self.log.error(
                "The task name provided is not of type str, got %r", task_name
            )
            return self

        command = {
            "name": ERASE_ERROR,
            "task": task_name,
            "views": ALL_VIEWS,
            "data": {},
        }
        return self.run(command)

    def is_handshake_valid(self, message: Any) -> bool:
        """Return whether a message is a valid handshake reply.

        A reply is valid when it is a mapping whose ``handshake`` value is
        ``True``. Override to apply a stricter check.
        """
        return isinstance(message, Mapping) and message.get("handshake") is True

    # ------------------------------------------------------------------
    # Connector and task hook listeners
    # ------------------------------------------------------------------

    def _on_task_start(self, task: Any) -> None:
        task_name = task.get("task") if isinstance(task, Mapping) else task
        self.erase_error(task_name)

    def _on_socket_connect(self) -> None:
        self.connector.send(build_handshake(self.plugin_id, self.id))
        self.log.info("Connected")
        self.emit("connect")

    def _on_socket_close(self, caused_by_error: bool) -> None:
        self._is_handshake_complete = False
        self.log.debug("Disconnected")
        self.emit("close", caused_by_error)

    def _on_socket_data(self, messages: list[Any]) -> None:
        self.log.debug("Messages: %r", messages)

        if not self._is_handshake_complete:
            # Only the first message of the batch is the handshake reply
            message = messages[0]
            if not self.is_handshake_valid(message):
                self.emit("invalid_handshake", message)
                self.connector.close()
                self.log.info("Invalid handshake")
            else:
                self._is_handshake_complete = True
            return

        for message in messages:
            self._loop.call_soon(self.emit, "message", message)

    def _on_socket_error(self, exc: Exception) -> None:
        self.log.debug("Socket error: %s", exc)
        self.emit("error", exc)

    def _on_socket_reconnect_attempt(self, attempt: int) -> None:
        self.log.debug("Reconnection attempt: %s", attempt)
        self.emit("reconnect_attempt", attempt)

"""Per-instance event registry.

Connectors and editor sessions publish their lifecycle through named events
(``connect``, ``close``, ``data``, ``message``...). Listeners are plain
callables invoked synchronously, in registration order.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Observer registry keyed by event name.

    A listener raising an exception is logged and does not prevent the
    remaining listeners from running. Listeners added or removed while an
    event is being emitted take effect from the next emit.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> Listener:
        """Register a listener for an event and return it."""
        self._listeners.setdefault(event, []).append(listener)
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Register a listener that is removed after its first call.

        Returns:
            The wrapper actually registered, usable with ``remove_listener``.
        """

        def wrapper(*args: Any) -> Any:
            self.remove_listener(event, wrapper)
            return listener(*args)

        return self.on(event, wrapper)

    def remove_listener(self, event: str, listener: Listener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(event)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del self._listeners[event]

    def remove_all_listeners(self, event: str | None = None) -> None:
        """Unregister every listener, or only those of one event."""
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def listeners(self, event: str) -> list[Listener]:
        """Return a copy of the listeners registered for an event."""
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event`` with ``args``.

        Returns:
            True if at least one listener was registered.
        """
        listeners = self.listeners(event)
        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                logger.exception("Listener for %r event failed", event)
        return bool(listeners)

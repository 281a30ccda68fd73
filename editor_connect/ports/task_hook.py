"""Task hook port interface.

A build tool notifies the editor session when a task starts so that errors
shown for a previous run of that task can be erased.
"""

from collections.abc import Callable
from typing import Any, Protocol

TASK_START_EVENT = "task_start"


class TaskHook(Protocol):
    """Protocol for build-tool objects that publish task lifecycle events.

    The ``task_start`` listener receives either the task name or a mapping
    with a ``task`` key holding the name.
    """

    def on(self, event: str, listener: Callable[..., Any]) -> Any:
        """Register ``listener`` for ``event``."""
        ...

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> Any:
        """Unregister ``listener`` from ``event``; no-op if not registered."""
        ...

"""Logger port interface.

Components only need a leveled sink with a settable level; a stdlib
``logging.Logger`` satisfies this protocol.
"""

from typing import Any, Protocol


class Logger(Protocol):
    """Protocol for the leveled logger shared by connectors and sessions."""

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def setLevel(self, level: int | str) -> None: ...  # noqa: N802

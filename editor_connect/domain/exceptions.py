"""Domain exceptions for editor-connect.

These exceptions represent configuration mistakes made by the caller. They are
raised synchronously from ``init``/``create`` and are never raised for
transport or protocol failures, which surface as events instead.
"""


class EditorConnectError(Exception):
    """Base exception for all editor-connect errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class InvalidPortError(EditorConnectError):
    """Raised when the port is not a finite number."""

    pass


class MissingLoggerError(EditorConnectError):
    """Raised when a connector is initialized without a logger."""

    pass


class InvalidOptionsError(EditorConnectError):
    """Raised when session options are not a mapping."""

    pass

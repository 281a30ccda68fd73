"""Normalization of build errors into editor markers.

Build tools raise errors with inconsistent attribute names for the file and
position of a failure. ``normalize_error`` reduces any such error, exception
or plain mapping, to a NormalizedError; ``serialize_error`` produces the
JSON-safe copy of the original error sent alongside it.
"""

import json
from collections.abc import Mapping
from typing import Any

from editor_connect.domain.entities import NormalizedError

MAX_MESSAGE_LENGTH = 2000

# Attribute aliases, in lookup order
_LINE_KEYS = ("line", "lineNumber", "lineno")
_COLUMN_KEYS = ("column", "col", "colno")
_FILE_KEYS = ("file", "fileName", "filename")

_SASS_PLUGIN = "gulp-sass"


def _get(err: Any, key: str) -> Any:
    if isinstance(err, Mapping):
        return err.get(key)
    return getattr(err, key, None)


def _first(err: Any, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = _get(err, key)
        if value:
            return value
    return None


def _message_of(err: Any) -> Any:
    message = _get(err, "message")
    if message is None and isinstance(err, BaseException) and err.args:
        message = str(err)
    return message


def normalize_error(err: Any, task_name: str | None = None) -> NormalizedError:
    """Normalize a build error's file, line, column and message.

    Args:
        err: Exception or mapping describing the error.
        task_name: Used as the plugin name when the error names none.

    Returns:
        NormalizedError with unusable values replaced by None (or "" for
        the file).
    """
    plugin_name = _get(err, "plugin") or task_name
    line = _first(err, _LINE_KEYS)
    column = _first(err, _COLUMN_KEYS)
    file = _first(err, _FILE_KEYS)
    message = _message_of(err)

    # Babel reports positions in a nested "loc" object
    loc = _get(err, "loc")
    if isinstance(loc, Mapping):
        line = loc.get("line")
        column = loc.get("column")

    line = line if isinstance(line, int) and not isinstance(line, bool) else None
    column = column if isinstance(column, int) and not isinstance(column, bool) else None
    message = message if isinstance(message, str) else None

    if message and len(message) > MAX_MESSAGE_LENGTH:
        message = message[:MAX_MESSAGE_LENGTH]

    # gulp-sass reports "stdin" for entry files; the real path leads the message
    if file == "stdin" and plugin_name == _SASS_PLUGIN and message:
        file = message.split("\n")[0]

    file = file if isinstance(file, str) else ""

    return NormalizedError(
        plugin_name=plugin_name,
        file=file,
        line=line,
        column=column,
        message=message,
    )


def serialize_error(err: Any) -> dict[str, Any]:
    """Return a JSON-safe dict describing the original error.

    Mappings are copied. Exceptions become their type name, message and any
    public attributes that are JSON-serializable.
    """
    if isinstance(err, Mapping):
        items = dict(err)
    else:
        attributes = getattr(err, "__dict__", {})
        items = {
            key: value for key, value in attributes.items() if not key.startswith("_")
        }
        items.setdefault("name", type(err).__name__)
        message = _message_of(err)
        if message is not None:
            items.setdefault("message", message)

    result = {}
    for key, value in items.items():
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = repr(value)
        result[str(key)] = value
    return result

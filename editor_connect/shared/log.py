"""Logger factory for editor sessions.

Sessions log through named children of the ``editor_connect`` logger so the
host application controls handlers and formatting with the standard
``logging`` configuration. Levels are given by name; ``silent`` disables a
single session's output without touching any other logger.
"""

import logging

ROOT_LOGGER_NAME = "editor_connect"

SILENT = logging.CRITICAL + 10

LOGGING_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "silent": SILENT,
}

logging.addLevelName(SILENT, "SILENT")


def level_from_name(level: str) -> int:
    """Translate a level name into a ``logging`` level.

    Args:
        level: One of debug, info, warn, warning, error, silent (any case).

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return LOGGING_LEVELS[level.lower()]
    except (KeyError, AttributeError):
        valid = ", ".join(sorted(LOGGING_LEVELS))
        raise ValueError(f"Unknown logging level {level!r} (valid: {valid})") from None


def set_logging_level(log: logging.Logger, level: str) -> None:
    """Set a logger's level by name."""
    log.setLevel(level_from_name(level))


def create_logger(name: str, logging_level: str = "info") -> logging.Logger:
    """Create the logger for one editor session.

    Args:
        name: Display name, e.g. "Editor.<id>" or "Editor:subl.<id>".
        logging_level: Initial level name.

    Returns:
        Logger named ``editor_connect.<name>``.

    Raises:
        ValueError: If logging_level is unknown.
    """
    log = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    set_logging_level(log, logging_level)
    return log

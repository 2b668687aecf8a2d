import importlib
import logging
from enum import StrEnum
from typing import Any

from fastsqs.exceptions import FastSQSCLIException


class LogLevels(StrEnum):
    """Log level names accepted by the --log-level option."""

    critical = "CRITICAL"
    fatal = "FATAL"
    error = "ERROR"
    warning = "WARNING"
    warn = "WARN"
    info = "INFO"
    debug = "DEBUG"


LOGGING_LEVEL_MAP: dict[str, int] = {
    LogLevels.critical: logging.CRITICAL,
    LogLevels.fatal: logging.FATAL,
    LogLevels.error: logging.ERROR,
    LogLevels.warning: logging.WARNING,
    LogLevels.warn: logging.WARNING,
    LogLevels.info: logging.INFO,
    LogLevels.debug: logging.DEBUG,
}


def get_log_level(level: LogLevels | str | int) -> int:
    """Get the log level.

    Args:
        level: The log level to get. Can be an integer, a LogLevels enum value, or a string.

    Returns:
        The log level as an integer.

    """
    if isinstance(level, int):
        return level

    if isinstance(level, LogLevels):
        return LOGGING_LEVEL_MAP[level.value]

    if isinstance(level, str) and level.upper() in LOGGING_LEVEL_MAP:
        return LOGGING_LEVEL_MAP[level.upper()]

    possible_values = [member.value for member in LogLevels]
    raise FastSQSCLIException(
        f"Invalid value for '--log-level', it should be one of {possible_values}"
    )


def import_from_string(import_str: str) -> Any:
    """Imports an attribute given as 'module:attribute'.

    Nested attributes are allowed, e.g. 'app.handlers:OrderHandler.handle'.
    """
    module_str, _, attrs_str = import_str.partition(":")
    if not module_str or not attrs_str:
        raise FastSQSCLIException(
            f"Import string '{import_str}' must be in format '<module>:<attribute>'."
        )

    try:
        instance = importlib.import_module(module_str)
    except ModuleNotFoundError as e:
        if e.name != module_str:
            raise
        raise FastSQSCLIException(f"Could not import module '{module_str}'.") from e

    try:
        for attr_str in attrs_str.split("."):
            instance = getattr(instance, attr_str)
    except AttributeError as e:
        raise FastSQSCLIException(
            f"Attribute '{attrs_str}' not found in module '{module_str}'."
        ) from e

    return instance

"""Core logging implementation for schemacraft.

Library modules only call ``get_logger``; handlers are installed by the
CLI through ``setup_logging`` so that embedding applications keep control
of their own logging configuration.
"""

import logging
import sys
from typing import Optional, Union

__all__ = ["DEFAULT_LOGGER_NAME", "get_logger", "resolve_level", "setup_logging"]

DEFAULT_LOGGER_NAME = "schemacraft"


def resolve_level(level: Union[int, str]) -> int:
    """Convert a level name such as ``"debug"`` to its numeric value.

    Args:
        level: Numeric level or case-insensitive level name.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(level: Union[int, str] = logging.WARNING, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, numeric or by name.
        stream: Output stream.
    """
    logging.basicConfig(
        level=resolve_level(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)

"""Logging micro API for schemacraft."""

from .lib import DEFAULT_LOGGER_NAME, get_logger, resolve_level, setup_logging

__all__ = ["DEFAULT_LOGGER_NAME", "get_logger", "resolve_level", "setup_logging"]

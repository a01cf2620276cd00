"""Centralized configuration management for schemacraft.

Example:
    >>> from schemacraft.config import EnvVar, get_environment
    >>>
    >>> strict = get_environment(EnvVar.SCHEMACRAFT_STRICT_RULES)
    >>>
    >>> for var in list_environment_variables("validation"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: CLI log output
    validation: Rule engine behaviour
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

__all__ = [
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "list_environment_variables",
]

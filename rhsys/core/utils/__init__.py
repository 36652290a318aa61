"""Utility functions for rhsys."""

from rhsys.core.utils.config import (
    ConfigError,
    load_and_resolve_config,
    load_config_from_module,
    load_config_with_fallback,
    resolve_config_inheritance,
)
from rhsys.core.utils.env import load_env_file_if_present, require_env

__all__ = [
    "load_env_file_if_present",
    "require_env",
    "load_config_from_module",
    "load_config_with_fallback",
    "load_and_resolve_config",
    "resolve_config_inheritance",
    "ConfigError",
]

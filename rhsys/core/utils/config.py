"""Configuration loading utilities using importlib.

Client profiles are plain Python modules exposing a ``CONFIGURATION`` dict.
A profile may extend another one through the ``"__inherits__"`` key.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration loading or resolution fails."""

    pass


def load_config_from_module(
    module_path: str,
    config_name: str = "CONFIGURATION",
    default: Any | None = None,
) -> Any:
    """Load a configuration object from a Python module using importlib.

    Args:
        module_path: Dotted module path (e.g., "rhsys.profiles")
        config_name: Name of the configuration object to retrieve (default: "CONFIGURATION")
        default: Default value to return if loading fails

    Returns:
        The configuration object from the module, or default if loading fails

    Examples:
        >>> profiles = load_config_from_module("rhsys.profiles")
        >>> custom = load_config_from_module("myapp.rh_profiles", "PROFILES")
    """
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.debug(f"Could not import module '{module_path}': {e}")
        return default

    if not hasattr(module, config_name):
        logger.warning(f"Module '{module_path}' does not have attribute '{config_name}'")
        return default

    config = getattr(module, config_name)
    logger.debug(f"Loaded configuration from {module_path}.{config_name}")
    return config


def load_config_with_fallback(
    primary_module: str,
    fallback_modules: list[str] | None = None,
    config_name: str = "CONFIGURATION",
    default: Any | None = None,
) -> Any:
    """Load configuration with fallback to alternative modules.

    Attempts to load configuration from the primary module first, then tries
    fallback modules in order until one succeeds.

    Examples:
        >>> config = load_config_with_fallback(
        ...     "configs.client_profiles",
        ...     fallback_modules=["rhsys.profiles"]
        ... )
    """
    config = load_config_from_module(primary_module, config_name, default=None)
    if config is not None:
        return config

    for fallback in fallback_modules or []:
        config = load_config_from_module(fallback, config_name, default=None)
        if config is not None:
            logger.info(f"Using fallback configuration from '{fallback}'")
            return config

    logger.warning(f"Could not load configuration from any module, using default: {default}")
    return default


def resolve_config_inheritance(config_dict: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
    """Resolve inheritance in a configuration dictionary.

    Returns a fully resolved dictionary where every entry carries the values
    of its ancestors, overridden by its own.

    Raises:
        ConfigError: If circular inheritance detected or parent not found

    Examples:
        >>> config = {
        ...     "default": {"auto_retry": True, "max_retries": 5},
        ...     "no_retry": {"__inherits__": "default", "auto_retry": False}
        ... }
        >>> resolved = resolve_config_inheritance(config)
        >>> resolved["no_retry"]["max_retries"]
        5
    """
    resolved_configs: dict[str, dict[str, Any]] = {}

    def _resolve_single(name: str, config: dict[str, Any], visited: set[str]) -> dict[str, Any]:
        if name in visited:
            chain = " -> ".join(sorted(visited)) + f" -> {name}"
            raise ConfigError(f"Circular inheritance detected: {chain}")

        if name in resolved_configs:
            return resolved_configs[name]

        if "__inherits__" not in config:
            resolved = config.copy()
            resolved_configs[name] = resolved
            return resolved

        parent_name = config["__inherits__"]
        if parent_name not in config_dict:
            raise ConfigError(
                f"Configuration '{name}' inherits from '{parent_name}', "
                f"but '{parent_name}' not found"
            )

        resolved_parent = _resolve_single(parent_name, config_dict[parent_name], visited | {name})

        resolved = resolved_parent.copy()
        for key, value in config.items():
            if key != "__inherits__":
                resolved[key] = value

        logger.debug(f"Resolved inheritance for '{name}' from '{parent_name}'")
        resolved_configs[name] = resolved
        return resolved

    for name, config in config_dict.items():
        if name not in resolved_configs:
            _resolve_single(name, config, set())

    return resolved_configs


def load_and_resolve_config(
    module_path: str,
    fallback_modules: list[str] | None = None,
    config_name: str = "CONFIGURATION",
) -> dict[str, dict[str, Any]]:
    """Load configuration and resolve all inheritance relationships."""
    raw_config = load_config_with_fallback(module_path, fallback_modules, config_name)

    if raw_config is None or not isinstance(raw_config, dict):
        raise ConfigError(f"No usable '{config_name}' found in {module_path} or its fallbacks")

    resolved = resolve_config_inheritance(raw_config)
    logger.debug(f"Loaded and resolved {len(resolved)} configurations")
    return resolved

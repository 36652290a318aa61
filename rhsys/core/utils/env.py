from __future__ import annotations

import os
from pathlib import Path

from rhsys.core.utils.config import ConfigError


def load_env_file_if_present(path: str | Path = ".env", override: bool = False) -> dict[str, str]:
    """Load simple KEY=VALUE pairs from a .env file if present.

    Lets tokens and credentials live in `.env` next to the scripts without a
    python-dotenv dependency.

    Returns a dict of loaded key-values (also updates os.environ for the process).
    Lines starting with '#' are ignored. Quoted values are unquoted.
    """
    env_path = Path(path)
    loaded: dict[str, str] = {}
    if not env_path.exists():
        return loaded

    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if override or key not in os.environ:
            os.environ[key] = value
        loaded[key] = value
    return loaded


def require_env(env_key: str, dotenv: bool = True) -> str:
    """Return a required environment value, reading `.env` first if asked.

    Raises ConfigError naming the missing variable.
    """
    if dotenv:
        load_env_file_if_present()
    value = os.getenv(env_key)
    if not value:
        raise ConfigError(f"Missing {env_key}. Set it in the environment or .env")
    return value

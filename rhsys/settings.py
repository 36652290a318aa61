from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any

from rhsys.core.utils.config import ConfigError, load_and_resolve_config

logger = logging.getLogger(__name__)

PROFILE_MODULE = "configs.client_profiles"
FALLBACK_PROFILE_MODULES = ["rhsys.profiles"]
DEFAULT_PROFILE = "default"

LOG_IN_PATH = "oauth2/token/"
QUOTES_PATH = "quotes/"


@dataclass(frozen=True)
class ClientSettings:
    api_url: str
    client_id: str
    expires_in: int
    user_agent: str
    timeout: float = 30.0
    auto_refresh: bool = True
    auto_retry: bool = True
    max_retries: int | None = 200
    retry_backoff: float = 1.0

    @property
    def login_url(self) -> str:
        return f"{self.api_url}{LOG_IN_PATH}"

    def url_for(self, path: str) -> str:
        return f"{self.api_url}{path.lstrip('/')}"

    def with_overrides(self, **overrides: Any) -> ClientSettings:
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ClientSettings:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown client settings: {sorted(unknown)}")
        try:
            settings = cls(**data)
        except TypeError as e:
            raise ConfigError(f"Incomplete client settings: {e}") from e
        if not settings.api_url.endswith("/"):
            settings = replace(settings, api_url=settings.api_url + "/")
        if settings.max_retries is not None and settings.max_retries < 0:
            raise ConfigError("max_retries must be >= 0 or None")
        if settings.retry_backoff < 0:
            raise ConfigError("retry_backoff must be >= 0")
        return settings


def load_settings(profile: str | None = None) -> ClientSettings:
    """Resolve a named client profile into ClientSettings.

    The profile defaults to $RH_PROFILE, then "default".
    """
    name = profile or os.getenv("RH_PROFILE") or DEFAULT_PROFILE
    profiles = load_and_resolve_config(PROFILE_MODULE, FALLBACK_PROFILE_MODULES)
    if name not in profiles:
        raise ConfigError(f"Unknown client profile '{name}'. Available: {sorted(profiles)}")
    logger.debug(f"Using client profile '{name}'")
    return ClientSettings.from_mapping(profiles[name])

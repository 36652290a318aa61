"""Built-in client profiles.

Define a ``configs/client_profiles.py`` module with the same ``CONFIGURATION``
shape to override these; ``rhsys.settings.load_settings`` tries it first.

Environment overrides:
    export RH_PROFILE=no_retry

Configuration inheritance:
    "slow_network": {
        "__inherits__": "default",
        "timeout": 60.0,
    }
"""

from __future__ import annotations

from typing import Any

CLIENT_ID = "c82SH0WZOsabOXGP2sxqcj34FxkvfnWRZBKlBjFS"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36 Edg/88.0.705.81"
)

CONFIGURATION: dict[str, dict[str, Any]] = {
    "default": {
        "api_url": "https://api.robinhood.com/",
        "client_id": CLIENT_ID,
        "expires_in": 86400,
        "user_agent": USER_AGENT,
        "timeout": 30.0,
        "auto_refresh": True,
        "auto_retry": True,
        "max_retries": 200,
        "retry_backoff": 1.0,
    },
    "no_retry": {
        "__inherits__": "default",
        "auto_retry": False,
    },
    # Keeps retrying server errors until the API recovers.
    "patient": {
        "__inherits__": "default",
        "max_retries": None,
        "retry_backoff": 5.0,
    },
    "manual": {
        "__inherits__": "no_retry",
        "auto_refresh": False,
    },
}

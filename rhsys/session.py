"""Authenticated session state and token refresh."""

from __future__ import annotations

import logging

import requests

from rhsys.core.transport import build_http_session
from rhsys.core.utils.env import require_env
from rhsys.errors import BadRefreshTokenError, RequestError, WrongResponseBodyError
from rhsys.headers import build_request_headers
from rhsys.models import DeviceIdentity, LoginOutcome, RefreshGrant
from rhsys.settings import ClientSettings, load_settings

logger = logging.getLogger(__name__)

INVALID_GRANT = "invalid_grant"


class Session:
    """A logged-in client.

    One caller owns a session at a time; there is no internal locking. All
    mutation goes through the setters below or through :meth:`refresh`.
    """

    def __init__(
        self,
        token: str,
        refresh_token: str,
        device: DeviceIdentity,
        *,
        token_expires_in: int = 0,
        username: str | None = None,
        password: str | None = None,
        user_agent: str | None = None,
        settings: ClientSettings | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.http = http or build_http_session()
        self.token = token
        self.refresh_token = refresh_token
        self.token_expires_in = token_expires_in
        self.device = device
        self.username = username
        self.password = password
        self._user_agent = user_agent or self.settings.user_agent
        self.auto_refresh = self.settings.auto_refresh
        self.auto_retry = self.settings.auto_retry
        self.max_retries = self.settings.max_retries
        self.retry_backoff = self.settings.retry_backoff

    def __repr__(self) -> str:
        return f"Session(username={self.username!r}, device={str(self.device)!r})"

    @classmethod
    def from_tokens(
        cls,
        token: str,
        refresh_token: str,
        device: DeviceIdentity | str,
        **kwargs,
    ) -> Session:
        """Resume a session from tokens obtained by an earlier MFA login.

        Calls fail with 401 once the access token expires; with
        ``auto_refresh`` on, a valid refresh token mints a new one.
        """
        if not isinstance(device, DeviceIdentity):
            device = DeviceIdentity.parse(device)
        return cls(token, refresh_token, device, **kwargs)

    @classmethod
    def from_env(cls, dotenv: bool = True, **kwargs) -> Session:
        """Build a session from RH_ACCESS_TOKEN, RH_REFRESH_TOKEN and RH_DEVICE_TOKEN."""
        return cls.from_tokens(
            require_env("RH_ACCESS_TOKEN", dotenv=dotenv),
            require_env("RH_REFRESH_TOKEN", dotenv=False),
            require_env("RH_DEVICE_TOKEN", dotenv=False),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # AgentToken
    # ------------------------------------------------------------------
    def user_agent(self) -> str:
        return self._user_agent

    def bearer_token(self) -> str | None:
        return self.token

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def change_agent(self, user_agent: str) -> None:
        self._user_agent = user_agent

    def set_credentials(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    def change_device_token(self, device: DeviceIdentity) -> None:
        """Tie subsequent calls to another device.

        The current tokens stay as they are; keeping them consistent with the
        new device is up to the caller.
        """
        self.device = device

    def change_device_token_str(self, device_token: str) -> None:
        self.device = DeviceIdentity.parse(device_token)

    def set_token(self, token: str) -> None:
        self.token = token

    def set_refresh_token(self, refresh_token: str) -> None:
        self.refresh_token = refresh_token

    def set_tokens(self, token: str, refresh_token: str, expires_in: int | None = None) -> None:
        self.token = token
        self.refresh_token = refresh_token
        if expires_in is not None:
            self.token_expires_in = expires_in

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------
    def refresh(self, expected_old_refresh_token: str | None = None) -> tuple[str, str] | None:
        """Exchange the refresh token for a new token pair.

        If ``expected_old_refresh_token`` is given and no longer matches the
        stored refresh token, another caller already rotated it: nothing is
        sent and None is returned.

        Returns:
            The new ``(token, refresh_token)`` pair.

        Raises:
            BadRefreshTokenError: The server answered ``invalid_grant``.
            RequestError: The request could not be sent.
            WrongResponseBodyError: The response was not a token payload.
        """
        old_refresh_token = self.refresh_token
        expected = expected_old_refresh_token
        if expected is not None and expected != old_refresh_token:
            logger.info("Refresh token already rotated, skipping refresh")
            return None

        grant = RefreshGrant(
            client_id=self.settings.client_id,
            device_token=self.device,
            refresh_token=old_refresh_token,
        )
        logger.info("Refreshing access token")
        try:
            res = self.http.post(
                self.settings.login_url,
                json=grant.to_wire(),
                headers=build_request_headers(self),
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise RequestError(f"Failed to refresh token ({e})", e) from e

        try:
            body = res.json()
        except ValueError as e:
            raise WrongResponseBodyError(f"status {res.status_code}, not JSON") from e

        if isinstance(body, dict) and body.get("error") == INVALID_GRANT:
            logger.warning("Refresh token rejected, a new MFA login is required")
            raise BadRefreshTokenError(old_refresh_token)

        try:
            outcome = LoginOutcome.from_wire(body)
        except ValueError as e:
            raise WrongResponseBodyError(f"status {res.status_code}, {e}") from e

        self.set_tokens(outcome.access_token, outcome.refresh_token, outcome.expires_in)
        logger.info(f"Access token refreshed, expires in {outcome.expires_in}s")
        return self.token, self.refresh_token

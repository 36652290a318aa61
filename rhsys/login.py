"""Multi-factor login handshake.

The API logs in in two steps: posting the password grant makes the server
send a one-time code by SMS/e-mail, and posting the same grant again with
``mfa_code`` added returns the tokens.

Example:
    pending = mfa_login("me@example.com", "hunter2")
    pending.request_mfa_code()
    session = pending.redeem_code(input("MFA code: "))
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

import requests

from rhsys.core.transport import build_http_session
from rhsys.core.utils.env import require_env
from rhsys.errors import (
    BadLoginBodyError,
    BadResponseBodyError,
    EmptyLoginBodyError,
    InvalidCredentialsError,
    LoginStateError,
    MissingMfaCodeError,
    RequestError,
)
from rhsys.headers import build_request_headers
from rhsys.models import Credential, DeviceIdentity, LoginOutcome, PasswordGrant
from rhsys.session import Session
from rhsys.settings import ClientSettings, load_settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MARKER = "Unable to log in with provided credentials"


class LoginState(Enum):
    ANONYMOUS = "anonymous"
    CODE_REQUESTED = "code_requested"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


def has_credential_failure(body: Any) -> bool:
    """True if a login response body carries the bad-credentials detail."""
    if not isinstance(body, dict):
        return False
    detail = body.get("detail")
    return isinstance(detail, str) and INVALID_CREDENTIALS_MARKER in detail


def load_credential(dotenv: bool = True) -> Credential:
    """Return credentials from RH_USERNAME / RH_PASSWORD (environment or .env)."""
    return Credential(
        username=require_env("RH_USERNAME", dotenv=dotenv),
        password=require_env("RH_PASSWORD", dotenv=False),
    )


class MfaLogin:
    """A login waiting for its MFA code.

    Holds only what is needed to resume without asking for credentials again.
    A successful :meth:`redeem_code` consumes it.
    """

    def __init__(
        self,
        credential: Credential,
        device: DeviceIdentity | None = None,
        *,
        user_agent: str | None = None,
        settings: ClientSettings | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.http = http or build_http_session()
        self.credential = credential
        self.device = device or DeviceIdentity.new()
        self.client_id = self.settings.client_id
        self._user_agent = user_agent or self.settings.user_agent
        self.state = LoginState.ANONYMOUS

    def __repr__(self) -> str:
        return f"MfaLogin(username={self.credential.username!r}, state={self.state.value})"

    def user_agent(self) -> str:
        return self._user_agent

    def bearer_token(self) -> str | None:
        return None

    def set_credentials(self, username: str, password: str) -> None:
        self.credential = Credential(username, password)

    def change_device_token(self, device: DeviceIdentity) -> None:
        self.device = device

    def change_device_token_str(self, device_token: str) -> None:
        self.device = DeviceIdentity.parse(device_token)

    def change_agent(self, user_agent: str) -> None:
        self._user_agent = user_agent

    def build_login_payload(self) -> PasswordGrant:
        return PasswordGrant(
            client_id=self.client_id,
            device_token=self.device,
            expires_in=self.settings.expires_in,
            username=self.credential.username,
            password=self.credential.password,
        )

    def request_mfa_code(self) -> None:
        """Post the password grant so the server sends out an MFA code.

        Raises:
            InvalidCredentialsError: The server rejected username/password.
            RequestError: The request could not be sent.
        """
        self._ensure_open()
        payload = self.build_login_payload().to_wire()
        body = self._post(payload)
        if has_credential_failure(body):
            self._fail()
        self.state = LoginState.CODE_REQUESTED
        logger.info(f"MFA code requested for {self.credential.username}")

    def redeem_code(self, mfa_code: str) -> Session:
        """Exchange the MFA code for an authenticated session.

        Raises:
            InvalidCredentialsError: The server rejected the login.
            BadResponseBodyError: The response was not a token payload.
            RequestError: The request could not be sent.
        """
        self._ensure_open()
        payload = self._payload_with_code(mfa_code)
        body = self._post(payload)
        if has_credential_failure(body):
            self._fail()

        try:
            outcome = LoginOutcome.from_wire(body)
        except ValueError as e:
            raise BadResponseBodyError(str(e)) from e

        self.state = LoginState.AUTHENTICATED
        logger.info(f"Logged in as {self.credential.username}")
        return Session(
            outcome.access_token,
            outcome.refresh_token,
            self.device,
            token_expires_in=outcome.expires_in,
            username=self.credential.username,
            password=self.credential.password,
            user_agent=self._user_agent,
            settings=self.settings,
            http=self.http,
        )

    def _payload_with_code(self, mfa_code: str) -> dict[str, Any]:
        try:
            payload = json.loads(json.dumps(self.build_login_payload().to_wire()))
        except (TypeError, ValueError) as e:
            raise BadLoginBodyError(str(e)) from e
        if not isinstance(payload, dict) or not payload:
            raise EmptyLoginBodyError()

        payload["mfa_code"] = str(mfa_code)
        if payload.get("mfa_code") != str(mfa_code):
            raise MissingMfaCodeError()
        return payload

    def _post(self, payload: dict[str, Any]) -> Any:
        try:
            res = self.http.post(
                self.settings.login_url,
                json=payload,
                headers=build_request_headers(self),
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise RequestError(f"Failed to log in ({e})", e) from e
        try:
            return res.json()
        except ValueError:
            logger.debug(f"Login response (status {res.status_code}) is not JSON")
            return None

    def _ensure_open(self) -> None:
        if self.state in (LoginState.AUTHENTICATED, LoginState.FAILED):
            raise LoginStateError(f"Login already {self.state.value}")

    def _fail(self) -> None:
        self.state = LoginState.FAILED
        logger.warning(f"Login rejected for {self.credential.username}")
        raise InvalidCredentialsError()


def mfa_login(
    username: str,
    password: str,
    device: DeviceIdentity | None = None,
    settings: ClientSettings | None = None,
) -> MfaLogin:
    """Start an MFA login; call ``request_mfa_code`` on the result next."""
    return MfaLogin(Credential(username, password), device, settings=settings)

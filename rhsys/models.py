"""Wire payloads and value types for the OAuth-style token endpoint."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from rhsys.errors import InvalidDeviceTokenError

SCOPE_INTERNAL = "internal"
TOKEN_TYPE_BEARER = "Bearer"
GRANT_PASSWORD = "password"
GRANT_REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class DeviceIdentity:
    """Stable per-installation identifier sent as ``device_token``.

    Sessions are tied to the device they logged in with, so rotate it only
    when you deliberately want to reuse a session minted on another device.
    """

    value: uuid.UUID

    @classmethod
    def new(cls) -> DeviceIdentity:
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, text: str) -> DeviceIdentity:
        try:
            return cls(uuid.UUID(str(text)))
        except (ValueError, AttributeError, TypeError) as e:
            raise InvalidDeviceTokenError(text) from e

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class Credential:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class PasswordGrant:
    client_id: str
    device_token: DeviceIdentity
    expires_in: int
    username: str
    password: str = field(repr=False)
    scope: str = SCOPE_INTERNAL

    grant_type = GRANT_PASSWORD

    def to_wire(self) -> dict[str, Any]:
        return {
            "client_id": self.client_id,
            "device_token": str(self.device_token),
            "expires_in": self.expires_in,
            "grant_type": self.grant_type,
            "scope": self.scope,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> PasswordGrant:
        if data.get("grant_type") != GRANT_PASSWORD:
            raise ValueError(f"Expected grant_type 'password', got {data.get('grant_type')!r}")
        return cls(
            client_id=data["client_id"],
            device_token=DeviceIdentity.parse(data["device_token"]),
            expires_in=int(data["expires_in"]),
            username=data["username"],
            password=data["password"],
            scope=data.get("scope", SCOPE_INTERNAL),
        )


@dataclass(frozen=True)
class RefreshGrant:
    client_id: str
    device_token: DeviceIdentity
    refresh_token: str = field(repr=False)
    scope: str = SCOPE_INTERNAL

    grant_type = GRANT_REFRESH_TOKEN
    token_type = TOKEN_TYPE_BEARER

    def to_wire(self) -> dict[str, Any]:
        return {
            "token_type": self.token_type,
            "scope": self.scope,
            "refresh_token": self.refresh_token,
            "grant_type": self.grant_type,
            "client_id": self.client_id,
            "device_token": str(self.device_token),
        }


@dataclass(frozen=True)
class LoginOutcome:
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_in: int
    token_type: str = TOKEN_TYPE_BEARER
    scope: str = SCOPE_INTERNAL
    mfa_code: str | None = None
    backup_code: Any | None = None

    @classmethod
    def from_wire(cls, body: Any) -> LoginOutcome:
        """Build an outcome from a token response, or raise ValueError.

        Never returns a partially populated outcome.
        """
        if not isinstance(body, dict):
            raise ValueError(f"expected a JSON object, got {type(body).__name__}")
        for key in ("access_token", "refresh_token"):
            if not isinstance(body.get(key), str) or not body[key]:
                raise ValueError(f"missing field '{key}'")
        expires_in = body.get("expires_in")
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise ValueError("missing or non-integer field 'expires_in'")
        token_type = body.get("token_type", TOKEN_TYPE_BEARER)
        if token_type != TOKEN_TYPE_BEARER:
            raise ValueError(f"unsupported token_type {token_type!r}")
        mfa_code = body.get("mfa_code")
        return cls(
            access_token=body["access_token"],
            refresh_token=body["refresh_token"],
            expires_in=expires_in,
            token_type=token_type,
            scope=body.get("scope", SCOPE_INTERNAL),
            mfa_code=str(mfa_code) if mfa_code is not None else None,
            backup_code=body.get("backup_code"),
        )

"""Client for the Robinhood unofficial REST API.

This package provides:
- The two-step MFA login (`rhsys.login`)
- An authenticated session with token refresh (`rhsys.session`)
- Request dispatch with refresh-on-401 and retry of transient failures
  (`rhsys.dispatch`)
- Quote lookups built on top of it (`rhsys.queries`)
"""

from rhsys.dispatch import ApiRequest, RequestKind, dispatch
from rhsys.login import LoginState, MfaLogin, load_credential, mfa_login
from rhsys.models import Credential, DeviceIdentity
from rhsys.session import Session
from rhsys.settings import ClientSettings, load_settings

__all__ = [
    "ApiRequest",
    "ClientSettings",
    "Credential",
    "DeviceIdentity",
    "LoginState",
    "MfaLogin",
    "RequestKind",
    "Session",
    "dispatch",
    "load_credential",
    "load_settings",
    "mfa_login",
]

#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import logging

from rhsys.login import MfaLogin, load_credential
from rhsys.models import Credential, DeviceIdentity
from rhsys.settings import load_settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Log in to Robinhood with an MFA code")
    parser.add_argument("--username", default=None, help="Defaults to $RH_USERNAME or .env")
    parser.add_argument("--password", default=None, help="Defaults to $RH_PASSWORD or .env")
    parser.add_argument("--device-token", dest="device_token", default=None, help="UUID")
    parser.add_argument("--profile", default=None, help="Client profile (defaults to $RH_PROFILE)")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.username and args.password:
        credential = Credential(args.username, args.password)
    else:
        credential = load_credential()
    device = DeviceIdentity.parse(args.device_token) if args.device_token else None

    pending = MfaLogin(credential, device, settings=load_settings(args.profile))
    pending.request_mfa_code()
    code = input("MFA code: ").strip()
    session = pending.redeem_code(code)

    print(
        json.dumps(
            {
                "ok": True,
                "device_token": str(session.device),
                "token_prefix": session.token[:16] + "...",
                "expires_in": session.token_expires_in,
            }
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

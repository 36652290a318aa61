#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict

from rhsys.queries import get_quote
from rhsys.session import Session
from rhsys.settings import load_settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the latest quote for a symbol (/quotes/)")
    parser.add_argument("symbol", help="Ticker symbol, e.g. SPY")
    parser.add_argument("--profile", default=None, help="Client profile (defaults to $RH_PROFILE)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    session = Session.from_env(settings=load_settings(args.profile))
    quote = get_quote(session, args.symbol)
    print(json.dumps(asdict(quote), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

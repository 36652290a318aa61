from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from rhsys.dispatch import get
from rhsys.errors import WrongResponseBodyError
from rhsys.session import Session
from rhsys.settings import QUOTES_PATH


@dataclass(frozen=True)
class Quote:
    symbol: str
    ask_price: str
    ask_size: int
    bid_price: str
    bid_size: int
    last_trade_price: str
    previous_close: str
    adjusted_previous_close: str
    previous_close_date: str
    trading_halted: bool
    has_traded: bool
    last_trade_price_source: str
    updated_at: str
    instrument: str
    instrument_id: str
    last_extended_hours_trade_price: str | None = None

    @classmethod
    def from_wire(cls, body: Any) -> Quote:
        if not isinstance(body, dict):
            raise WrongResponseBodyError("quote is not a JSON object")
        names = [f.name for f in fields(cls)]
        missing = [n for n in names if n != "last_extended_hours_trade_price" and n not in body]
        if missing:
            raise WrongResponseBodyError(f"quote missing fields {missing}")
        return cls(**{n: body.get(n) for n in names})


def get_quote(session: Session, symbol: str) -> Quote:
    """Fetch the latest quote for ``symbol`` (e.g. "SPY")."""
    url = session.settings.url_for(f"{QUOTES_PATH}{symbol.upper()}/")
    res = get(session, url)
    try:
        body = res.json()
    except ValueError as e:
        raise WrongResponseBodyError(f"quote for {symbol} is not JSON") from e
    return Quote.from_wire(body)


def get_price(session: Session, symbol: str) -> float:
    quote = get_quote(session, symbol)
    try:
        return float(quote.last_trade_price)
    except (TypeError, ValueError) as e:
        raise WrongResponseBodyError(
            f"last_trade_price {quote.last_trade_price!r} is not a number"
        ) from e

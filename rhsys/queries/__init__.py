from rhsys.queries.quotes import Quote, get_price, get_quote

__all__ = ["Quote", "get_quote", "get_price"]

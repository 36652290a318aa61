from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AgentToken(Protocol):
    """Anything that can decorate an outbound request."""

    def user_agent(self) -> str: ...

    def bearer_token(self) -> str | None: ...


def build_request_headers(requestor: AgentToken) -> dict[str, str]:
    headers = {"User-Agent": requestor.user_agent()}
    token = requestor.bearer_token()
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    return headers

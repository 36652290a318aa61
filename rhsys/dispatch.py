"""Authenticated request dispatch with token refresh and retry.

Three kinds of failure are handled differently:

- 401: refresh the token and send again.
- 5xx, connection errors and timeouts: sleep ``retry_backoff`` seconds and
  send again, up to ``max_retries`` times.
- 404 and every other error: raise straight away.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

from rhsys.errors import (
    NotFoundError,
    RefreshError,
    RequestError,
    UnauthorizedError,
)
from rhsys.headers import build_request_headers
from rhsys.session import Session

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


class RequestKind(Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class ApiRequest:
    kind: RequestKind
    url: str
    payload: Any | None = None

    def prepare(self, headers: dict[str, str]) -> requests.Request:
        """Build a new request for one attempt; a sent request is never reused."""
        if self.kind is RequestKind.POST and self.payload is not None:
            return requests.Request(self.kind.value, self.url, headers=headers, json=self.payload)
        return requests.Request(self.kind.value, self.url, headers=headers)


def dispatch(session: Session, request: ApiRequest) -> requests.Response:
    """Send ``request`` on behalf of ``session`` and return the response.

    Raises:
        UnauthorizedError: 401 and refresh is off or failed.
        NotFoundError: 404.
        RequestError: Any other failure, or retries exhausted/disabled.
    """
    retries = 0
    while True:
        prepared = session.http.prepare_request(request.prepare(build_request_headers(session)))
        try:
            res = session.http.send(prepared, timeout=session.settings.timeout)
        except TRANSIENT_ERRORS as e:
            if not _may_retry(session, retries):
                raise RequestError(f"{request.kind.value} {request.url} failed ({e})", e) from e
            retries += 1
            logger.warning(f"{request.kind.value} {request.url} failed ({e}), retry {retries}")
            time.sleep(session.retry_backoff)
            continue
        except requests.RequestException as e:
            raise RequestError(f"{request.kind.value} {request.url} failed ({e})", e) from e

        status = res.status_code
        if status < 400:
            return res

        if status == 401:
            if not session.auto_refresh:
                raise UnauthorizedError()
            logger.warning(f"401 from {request.url}, refreshing token")
            try:
                session.refresh(session.refresh_token)
            except (RefreshError, RequestError) as e:
                raise UnauthorizedError(f"Unauthorized request 401, refresh failed ({e})") from e
            continue

        if status == 404:
            raise NotFoundError(request.url)

        error = _http_error(res)
        if status >= 500 and _may_retry(session, retries):
            retries += 1
            logger.warning(f"{status} from {request.url}, retry {retries}")
            time.sleep(session.retry_backoff)
            continue
        raise RequestError(str(error), error) from error


def get(session: Session, url: str) -> requests.Response:
    return dispatch(session, ApiRequest(RequestKind.GET, url))


def post(session: Session, url: str, payload: Any | None = None) -> requests.Response:
    return dispatch(session, ApiRequest(RequestKind.POST, url, payload))


def _may_retry(session: Session, retries: int) -> bool:
    if not session.auto_retry:
        return False
    return session.max_retries is None or retries < session.max_retries


def _http_error(res: requests.Response) -> requests.HTTPError:
    try:
        res.raise_for_status()
    except requests.HTTPError as e:
        return e
    return requests.HTTPError(f"{res.status_code} Error for url: {res.url}", response=res)

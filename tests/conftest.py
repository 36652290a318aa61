from __future__ import annotations

import uuid
from unittest.mock import Mock

import pytest
import requests

from rhsys.models import DeviceIdentity
from rhsys.session import Session
from rhsys.settings import ClientSettings

DEVICE_UUID = "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b"


def _make_response(status_code: int = 200, body=None, url: str = "https://api.example.com/x"):
    """Mock a requests.Response with the given status and JSON body."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.url = url
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error for url: {url}", response=response
        )
    return response


@pytest.fixture
def clean_env(monkeypatch):
    """Remove RH_* variables from the environment for the duration of a test."""
    for key in [
        "RH_PROFILE",
        "RH_USERNAME",
        "RH_PASSWORD",
        "RH_ACCESS_TOKEN",
        "RH_REFRESH_TOKEN",
        "RH_DEVICE_TOKEN",
    ]:
        # setenv first so teardown restores the original state
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    yield


@pytest.fixture
def settings():
    return ClientSettings(
        api_url="https://api.example.com/",
        client_id="test-client-id",
        expires_in=86400,
        user_agent="test-agent/1.0",
        timeout=5.0,
        auto_refresh=True,
        auto_retry=True,
        max_retries=5,
        retry_backoff=0.25,
    )


@pytest.fixture
def device():
    return DeviceIdentity(uuid.UUID(DEVICE_UUID))


@pytest.fixture
def http():
    """A stand-in for requests.Session; prepare_request echoes the Request it gets."""
    mock_http = Mock(spec=requests.Session)
    mock_http.prepare_request.side_effect = lambda req: req
    return mock_http


@pytest.fixture
def session(settings, device, http):
    return Session(
        "access-1",
        "refresh-1",
        device,
        token_expires_in=86400,
        username="alice",
        password="s3cret",
        settings=settings,
        http=http,
    )


@pytest.fixture
def token_body():
    """A successful token endpoint response."""
    return {
        "access_token": "access-2",
        "expires_in": 740067,
        "token_type": "Bearer",
        "scope": "internal",
        "refresh_token": "refresh-2",
        "mfa_code": "329503",
        "backup_code": None,
    }


@pytest.fixture
def make_response():
    return _make_response

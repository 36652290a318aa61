from __future__ import annotations

import pytest
import requests

from rhsys.core.utils.config import ConfigError
from rhsys.errors import BadRefreshTokenError, RequestError, WrongResponseBodyError
from rhsys.models import DeviceIdentity
from rhsys.session import Session


class TestRefresh:
    def test_posts_refresh_grant_with_current_headers(
        self, session, http, make_response, token_body
    ):
        http.post.return_value = make_response(200, token_body)

        result = session.refresh()

        assert result == ("access-2", "refresh-2")
        http.post.assert_called_once_with(
            "https://api.example.com/oauth2/token/",
            json={
                "token_type": "Bearer",
                "scope": "internal",
                "refresh_token": "refresh-1",
                "grant_type": "refresh_token",
                "client_id": "test-client-id",
                "device_token": "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b",
            },
            headers={"User-Agent": "test-agent/1.0", "Authorization": "Bearer access-1"},
            timeout=5.0,
        )

    def test_success_rotates_token_pair(self, session, http, make_response, token_body):
        http.post.return_value = make_response(200, token_body)

        session.refresh("refresh-1")

        assert session.token == "access-2"
        assert session.refresh_token == "refresh-2"
        assert session.token_expires_in == 740067

    def test_stale_expected_token_is_noop(self, session, http, make_response, token_body):
        http.post.return_value = make_response(200, token_body)
        session.refresh("refresh-1")

        assert session.refresh("refresh-1") is None

        assert session.token == "access-2"
        assert session.refresh_token == "refresh-2"
        assert http.post.call_count == 1

    def test_invalid_grant_never_mutates(self, session, http, make_response):
        http.post.return_value = make_response(400, {"error": "invalid_grant"})

        with pytest.raises(BadRefreshTokenError) as exc_info:
            session.refresh()

        assert exc_info.value.old_token == "refresh-1"
        assert session.token == "access-1"
        assert session.refresh_token == "refresh-1"
        assert session.token_expires_in == 86400

    def test_transport_error(self, session, http):
        http.post.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(RequestError, match="Failed to refresh token"):
            session.refresh()

        assert session.token == "access-1"

    def test_non_json_body(self, session, http, make_response):
        http.post.return_value = make_response(500, ValueError("html"))

        with pytest.raises(WrongResponseBodyError, match="status 500"):
            session.refresh()

    def test_incomplete_body_keeps_tokens(self, session, http, make_response):
        http.post.return_value = make_response(200, {"access_token": "only-access"})

        with pytest.raises(WrongResponseBodyError):
            session.refresh()

        assert session.token == "access-1"
        assert session.refresh_token == "refresh-1"

    def test_other_error_marker_is_wrong_body(self, session, http, make_response):
        http.post.return_value = make_response(400, {"error": "invalid_request"})

        with pytest.raises(WrongResponseBodyError):
            session.refresh()


class TestMutators:
    def test_set_tokens_updates_pair(self, session):
        session.set_tokens("a", "r", 60)
        assert (session.token, session.refresh_token, session.token_expires_in) == ("a", "r", 60)

    def test_single_setters(self, session):
        session.set_token("a")
        session.set_refresh_token("r")
        assert session.bearer_token() == "a"
        assert session.refresh_token == "r"

    def test_change_device_keeps_tokens(self, session):
        new_device = DeviceIdentity.new()
        session.change_device_token(new_device)
        assert session.device == new_device
        assert session.token == "access-1"

    def test_change_device_token_str_invalid(self, session, device):
        with pytest.raises(ValueError):
            session.change_device_token_str("zzz")
        assert session.device == device

    def test_set_credentials(self, session):
        session.set_credentials("bob", "pw")
        assert (session.username, session.password) == ("bob", "pw")

    def test_repr_hides_secrets(self, session):
        text = repr(session)
        assert "access-1" not in text
        assert "s3cret" not in text

    def test_policy_flags_come_from_settings(self, settings, device, http):
        no_retry = settings.with_overrides(auto_retry=False)
        session = Session("a", "r", device, settings=no_retry, http=http)
        assert session.auto_retry is False
        assert session.auto_refresh is True
        assert session.max_retries == 5
        assert session.retry_backoff == 0.25


class TestConstructors:
    def test_from_tokens_parses_device_string(self, settings, http):
        session = Session.from_tokens(
            "a", "r", "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b", settings=settings, http=http
        )
        assert str(session.device) == "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b"
        assert session.username is None

    def test_from_tokens_rejects_bad_device(self, settings, http):
        with pytest.raises(ValueError):
            Session.from_tokens("a", "r", "bad", settings=settings, http=http)

    def test_from_env(self, clean_env, monkeypatch, settings, http):
        monkeypatch.setenv("RH_ACCESS_TOKEN", "env-access")
        monkeypatch.setenv("RH_REFRESH_TOKEN", "env-refresh")
        monkeypatch.setenv("RH_DEVICE_TOKEN", "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b")

        session = Session.from_env(dotenv=False, settings=settings, http=http)

        assert session.token == "env-access"
        assert session.refresh_token == "env-refresh"

    def test_from_env_missing_token(self, clean_env, settings, http):
        with pytest.raises(ConfigError, match="RH_ACCESS_TOKEN"):
            Session.from_env(dotenv=False, settings=settings, http=http)

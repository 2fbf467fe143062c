"""
Tests for the /auth routes — redirect, state checks, callback outcomes.
"""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from strategies.registry import StrategyRegistry
from strategies.routes import _create_state, router
from strategies.twitch import TwitchStrategy

_USERS_BODY = (
    '{"data":[{"id":"44322889","login":"dallas","display_name":"dallas",'
    '"email":"email@provider.com"}]}'
)


def _handler(users_status: int = 200, token_status: int = 200, users_body: str = _USERS_BODY):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "id.twitch.tv":
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "at", "refresh_token": "rt"})
        return httpx.Response(users_status, text=users_body)

    return handler


def _client(verify=None, **handler_kwargs) -> TestClient:
    StrategyRegistry.reset()
    verify = verify or (lambda access_token, refresh_token, profile: {"id": profile.id})
    StrategyRegistry().use(
        TwitchStrategy(
            {
                "client_id": "ABC123",
                "client_secret": "secret",
                "callback_url": "http://testserver/auth/twitch/callback",
            },
            verify,
            transport=httpx.MockTransport(_handler(**handler_kwargs)),
        )
    )
    app = FastAPI()
    app.include_router(router, prefix="/auth")
    return TestClient(app, follow_redirects=False)


class TestBeginLogin:
    def teardown_method(self):
        StrategyRegistry.reset()

    def test_redirects_to_twitch(self):
        resp = _client().get("/auth/twitch", params={"force_verify": "true"})
        assert resp.status_code == 302

        location = httpx.URL(resp.headers["location"])
        assert location.host == "id.twitch.tv"
        assert location.params["force_verify"] == "true"
        assert location.params["state"]

    def test_unknown_strategy(self):
        assert _client().get("/auth/nope").status_code == 404

    def test_list_providers(self):
        resp = _client().get("/auth/providers")
        assert resp.json() == [{"name": "twitch", "type": "TwitchStrategy"}]


class TestCallback:
    def teardown_method(self):
        StrategyRegistry.reset()

    def test_success(self):
        resp = _client().get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("twitch")}
        )
        assert resp.status_code == 200
        assert resp.json() == {"provider": "twitch", "user": {"id": "44322889"}}

    @pytest.mark.parametrize("state", [None, "garbage", "eyJ9.deadbeef", "eyJ9.\u00e9"])
    def test_bad_state_rejected(self, state):
        params = {"code": "c"}
        if state:
            params["state"] = state
        resp = _client().get("/auth/twitch/callback", params=params)
        assert resp.status_code == 400

    def test_state_for_other_strategy_rejected(self):
        resp = _client().get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("github")}
        )
        assert resp.status_code == 400

    def test_verify_rejects(self):
        resp = _client(verify=MagicMock(return_value=False)).get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("twitch")}
        )
        assert resp.status_code == 401

    def test_access_denied(self):
        resp = _client().get(
            "/auth/twitch/callback",
            params={"error": "access_denied", "error_description": "denied"},
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "denied"

    def test_authorization_error(self):
        resp = _client().get("/auth/twitch/callback", params={"error": "server_error"})
        assert resp.status_code == 403

    def test_token_error(self):
        resp = _client(token_status=400).get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("twitch")}
        )
        assert resp.status_code == 400

    def test_profile_fetch_failure(self):
        resp = _client(users_status=503).get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("twitch")}
        )
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Failed to fetch user profile"

    def test_malformed_profile(self):
        resp = _client(users_body='{"data":[]}').get(
            "/auth/twitch/callback", params={"code": "c", "state": _create_state("twitch")}
        )
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Malformed profile response"

"""
Smoke tests for the application factory and the default verify callback.
"""

import pytest
from fastapi.testclient import TestClient

import main
from strategies.registry import StrategyRegistry
from utils.schemas import Profile


class TestCreateApp:
    def setup_method(self):
        StrategyRegistry.reset()

    def teardown_method(self):
        StrategyRegistry.reset()

    def test_twitch_registered_when_configured(self, monkeypatch):
        monkeypatch.setattr(main.config, "twitch_client_id", "abc")
        monkeypatch.setattr(main.config, "twitch_client_secret", "shh")

        client = TestClient(main.create_app(), follow_redirects=False)

        assert client.get("/auth/providers").json() == [
            {"name": "twitch", "type": "TwitchStrategy"}
        ]
        resp = client.get("/auth/twitch")
        assert resp.status_code == 302
        assert "X-Process-Time" in resp.headers

    def test_twitch_skipped_when_unconfigured(self, monkeypatch):
        monkeypatch.setattr(main.config, "twitch_client_id", "")
        monkeypatch.setattr(main.config, "twitch_client_secret", "")

        client = TestClient(main.create_app())

        assert client.get("/auth/providers").json() == []
        assert client.get("/auth/twitch").status_code == 404


class TestVerifyTwitchUser:
    @pytest.mark.asyncio
    async def test_profile_becomes_user(self):
        profile = Profile(
            provider="twitch",
            id="44322889",
            username="dallas",
            display_name="dallas",
            email="email@provider.com",
            raw_body="{}",
            parsed_json={},
        )
        user = await main.verify_twitch_user("at", "rt", profile)
        assert user == {
            "provider": "twitch",
            "id": "44322889",
            "username": "dallas",
            "display_name": "dallas",
            "email": "email@provider.com",
        }

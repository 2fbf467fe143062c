"""
Tests for the strategy registry.
"""

import pytest
from unittest.mock import MagicMock

from strategies.registry import StrategyRegistry
from strategies.twitch import TwitchStrategy


def _twitch() -> TwitchStrategy:
    return TwitchStrategy(
        {"client_id": "id", "client_secret": "secret", "callback_url": "https://app.test/cb"},
        MagicMock(),
    )


class TestStrategyRegistry:
    def setup_method(self):
        StrategyRegistry.reset()

    def teardown_method(self):
        StrategyRegistry.reset()

    def test_singleton(self):
        assert StrategyRegistry() is StrategyRegistry()

    def test_use_and_get(self):
        strategy = _twitch()
        StrategyRegistry().use(strategy)
        assert StrategyRegistry().get("twitch") is strategy

    def test_use_with_alias(self):
        strategy = _twitch()
        StrategyRegistry().use(strategy, name="twitch-admin")
        assert StrategyRegistry().get("twitch-admin") is strategy
        assert StrategyRegistry().get("twitch") is None

    def test_unuse(self):
        registry = StrategyRegistry()
        registry.use(_twitch())
        registry.unuse("twitch")
        assert registry.get("twitch") is None
        assert registry.list_strategies() == []

    def test_nameless_strategy_rejected(self):
        nameless = MagicMock(name="")
        nameless.name = ""
        with pytest.raises(ValueError):
            StrategyRegistry().use(nameless)

"""
StrategyRegistry — name → strategy lookup used by the auth routes.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from strategies.base import BaseStrategy

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Singleton registry for all login strategies."""

    _instance: Optional["StrategyRegistry"] = None

    def __new__(cls) -> "StrategyRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._strategies = {}
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (used by tests)."""
        cls._instance = None

    def use(self, strategy: BaseStrategy, name: Optional[str] = None) -> None:
        """Register a strategy under ``name`` (defaults to ``strategy.name``)."""
        name = name or strategy.name
        if not name:
            raise ValueError("Authentication strategies must have a name")
        if name in self._strategies:
            logger.warning("Strategy %s replaced", name)
        self._strategies[name] = strategy
        logger.info("Strategy registered: %s", name)

    def unuse(self, name: str) -> None:
        self._strategies.pop(name, None)

    def get(self, name: str) -> Optional[BaseStrategy]:
        """Get a strategy by name."""
        return self._strategies.get(name)

    def list_strategies(self) -> List[Dict[str, str]]:
        """Return info about all registered strategies."""
        return [
            {"name": name, "type": type(strategy).__name__}
            for name, strategy in self._strategies.items()
        ]

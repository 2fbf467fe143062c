"""
BaseStrategy — abstract interface for all login strategies.

The registry and the HTTP routes only talk to strategies through this
interface; how a strategy performs its handshake is its own business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from utils.schemas import AuthResult


class BaseStrategy(ABC):
    """Abstract base for all login strategies."""

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def name(self) -> str:
        """Unique slug: 'twitch', 'oauth2', …"""
        ...

    # ── Handshake ───────────────────────────────────────────────────────

    @abstractmethod
    def authorization_url(
        self, options: Optional[Dict[str, Any]] = None, state: Optional[str] = None
    ) -> str:
        """
        Build the provider's authorization URL for this request.

        Parameters
        ----------
        options : dict
            Per-request options (``scope``, provider-specific flags, …).
        state : str
            Opaque CSRF state echoed back by the provider.
        """
        ...

    @abstractmethod
    async def authenticate(
        self,
        query: Mapping[str, str],
        options: Optional[Dict[str, Any]] = None,
    ) -> AuthResult:
        """
        Run one step of the login for an incoming request.

        Parameters
        ----------
        query : Mapping
            The request's query parameters (``code``, ``error``, ``state``…).
        options : dict
            Per-request options.

        Returns
        -------
        An ``AuthResult`` with outcome ``redirect``, ``success`` or ``fail``.
        """
        ...

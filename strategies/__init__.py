"""
strategies — OAuth2 login strategies.

Provides a small, provider-agnostic OAuth2 stack:
  • OAuth2Client: authorize URL, code → token exchange, authenticated GET
  • OAuth2Strategy: redirect / callback handshake driver
  • StrategyRegistry + FastAPI routes for /auth/{name}

Each provider (Twitch, …) composes an OAuth2Strategy and supplies its
own authorization parameters and profile normalization.
"""

from strategies.errors import (
    AuthorizationError,
    ConfigurationError,
    InternalOAuthError,
    OAuth2RequestError,
    TokenError,
)
from strategies.twitch import TwitchStrategy

__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "InternalOAuthError",
    "OAuth2RequestError",
    "TokenError",
    "TwitchStrategy",
]

"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Twitch OAuth2 ───────────────────────────────────────────────────
    twitch_client_id: str = ""
    twitch_client_secret: str = ""
    twitch_callback_url: str = "http://localhost:8000/auth/twitch/callback"
    twitch_authorization_url: str = "https://id.twitch.tv/oauth2/authorize"
    twitch_token_url: str = "https://id.twitch.tv/oauth2/token"
    twitch_scope: str = "user:read:email"   # space-separated
    twitch_force_verify: Optional[bool] = None   # None = let Twitch decide

    # ── Security Secrets ──────────────────────────────────────────────────
    oauth_state_secret: str = "change-me-oauth-state"   # HMAC secret for OAuth CSRF state
    oauth_state_ttl_seconds: int = 600

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    def twitch_strategy_options(self) -> dict:
        """
        Options mapping for ``TwitchStrategy`` built from the environment.

        """
        options = {
            "client_id": self.twitch_client_id,
            "client_secret": self.twitch_client_secret,
            "callback_url": self.twitch_callback_url,
            "authorization_url": self.twitch_authorization_url,
            "token_url": self.twitch_token_url,
            "scope": self.twitch_scope.split() if self.twitch_scope else None,
        }
        if self.twitch_force_verify is not None:
            options["force_verify"] = self.twitch_force_verify
        return options

    def is_twitch_configured(self) -> bool:
        return bool(self.twitch_client_id and self.twitch_client_secret)


config = Settings()

"""
TwitchStrategy — log users in with their Twitch account.

Wraps a generic ``OAuth2Strategy`` and supplies the Twitch-specific parts:
default endpoints, Bearer-header credentials on GET, the Helix user
lookup, and the ``force_verify`` / ``response_type`` authorization params.

Example::

    async def verify(access_token, refresh_token, profile):
        user = await users.find_or_create(twitch_id=profile.id)
        return user or False

    registry.use(TwitchStrategy({
        "client_id": "123-456-789",
        "client_secret": "twitch-secret-key",
        "callback_url": "https://www.example.com/auth/twitch/callback",
    }, verify))
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from strategies.base import BaseStrategy
from strategies.errors import InternalOAuthError, OAuth2RequestError
from strategies.oauth2 import OAuth2Client
from strategies.oauth2_strategy import OAuth2Strategy, VerifyCallback, coerce_options
from utils.schemas import AuthResult, Profile, StrategyOptions

logger = logging.getLogger(__name__)

# Twitch OAuth2 endpoints
_TWITCH_AUTH_URL = "https://id.twitch.tv/oauth2/authorize"
_TWITCH_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
_TWITCH_USERS_URL = "https://api.twitch.tv/helix/users"

_DEFAULT_RESPONSE_TYPE = "token+id_token"


class TwitchStrategy(BaseStrategy):
    """OAuth2 login strategy for Twitch."""

    def __init__(
        self,
        options: Union[StrategyOptions, Mapping[str, Any], None],
        verify: Optional[VerifyCallback],
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        options = coerce_options(options)
        headers = dict(options.custom_headers)
        if options.client_id:
            # Helix wants the app's client id next to the user token
            headers.setdefault("Client-Id", options.client_id)
        options = options.model_copy(
            update={
                "authorization_url": options.authorization_url or _TWITCH_AUTH_URL,
                "token_url": options.token_url or _TWITCH_TOKEN_URL,
                "custom_headers": headers,
            }
        )

        self._strategy = OAuth2Strategy(
            options,
            verify,
            name="twitch",
            authorization_params=self.authorization_params,
            user_profile=self.user_profile,
            transport=transport,
        )

        # Helix rejects tokens passed as a query parameter
        self._oauth2.set_auth_method("Bearer")
        self._oauth2.use_authorization_header_for_get(True)

    @property
    def name(self) -> str:
        return "twitch"

    @property
    def options(self) -> StrategyOptions:
        return self._strategy.options

    @property
    def _oauth2(self) -> OAuth2Client:
        return self._strategy.oauth2

    # ── Hooks ───────────────────────────────────────────────────────────

    async def user_profile(self, access_token: str) -> Profile:
        """
        Retrieve the user's profile from Twitch.

        Returns a ``Profile`` with ``provider`` set to ``"twitch"`` and
        ``id``, ``username``, ``display_name`` and ``email`` taken from the
        first record of the Helix ``/users`` response.

        Raises ``InternalOAuthError`` if the request fails. A body that is
        not JSON or holds no user record raises the underlying
        ``ValueError`` / ``KeyError`` / ``IndexError`` as is.
        """
        try:
            body, _ = await self._oauth2.get(_TWITCH_USERS_URL, access_token)
        except (OAuth2RequestError, httpx.HTTPError) as exc:
            logger.warning("Twitch profile fetch failed: %s", exc)
            raise InternalOAuthError("Failed to fetch user profile", exc) from exc

        record = json.loads(body)["data"][0]

        return Profile(
            provider="twitch",
            id=record["id"],
            username=record["login"],
            display_name=record["display_name"],
            email=record.get("email"),
            raw_body=body,
            parsed_json=record,
        )

    def authorization_params(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Extra query parameters for the Twitch authorization request."""
        params: Dict[str, Any] = {}
        if "force_verify" in options:
            params["force_verify"] = bool(options["force_verify"])
        params["response_type"] = options.get("response_type") or _DEFAULT_RESPONSE_TYPE
        return params

    # ── Handshake (delegated) ───────────────────────────────────────────

    def authorization_url(
        self, options: Optional[Dict[str, Any]] = None, state: Optional[str] = None
    ) -> str:
        return self._strategy.authorization_url(options, state)

    async def authenticate(
        self,
        query: Mapping[str, str],
        options: Optional[Dict[str, Any]] = None,
    ) -> AuthResult:
        return await self._strategy.authenticate(query, options)

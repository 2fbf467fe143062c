"""
OAuth2Strategy — generic OAuth2 authorization-code handshake.

Drives one login through its two legs:

  1. no ``code`` in the request → redirect the user to the provider
  2. ``code`` present → exchange it for tokens, load the profile, and
     hand ``(access_token, refresh_token, profile)`` to the verify callback

Providers do not subclass this class. They build one, inject their
``authorization_params`` and ``user_profile`` hooks, and tune the owned
``OAuth2Client`` (see ``strategies.twitch``).
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import httpx

from strategies.base import BaseStrategy
from strategies.errors import (
    AuthorizationError,
    ConfigurationError,
    InternalOAuthError,
    OAuth2RequestError,
    TokenError,
)
from strategies.oauth2 import OAuth2Client
from utils.schemas import AuthResult, Profile, StrategyOptions

logger = logging.getLogger(__name__)

VerifyCallback = Callable[[Optional[str], Optional[str], Optional[Profile]], Any]
AuthorizationParamsHook = Callable[[Dict[str, Any]], Dict[str, Any]]
UserProfileHook = Callable[[str], Awaitable[Optional[Profile]]]

_REQUIRED_OPTIONS = ("authorization_url", "token_url", "client_id", "client_secret", "callback_url")


def coerce_options(options: Union[StrategyOptions, Mapping[str, Any], None]) -> StrategyOptions:
    if options is None:
        return StrategyOptions()
    if isinstance(options, StrategyOptions):
        return options
    return StrategyOptions(**dict(options))


async def _no_profile(access_token: str) -> Optional[Profile]:
    return None


class OAuth2Strategy(BaseStrategy):
    """Provider-agnostic OAuth2 login strategy built by composition."""

    def __init__(
        self,
        options: Union[StrategyOptions, Mapping[str, Any], None],
        verify: Optional[VerifyCallback],
        *,
        name: str = "oauth2",
        authorization_params: Optional[AuthorizationParamsHook] = None,
        user_profile: Optional[UserProfileHook] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        options = coerce_options(options)
        if verify is None:
            raise ConfigurationError("OAuth2Strategy requires a verify callback")
        for field in _REQUIRED_OPTIONS:
            if not getattr(options, field):
                raise ConfigurationError(f"OAuth2Strategy requires a {field} option")

        self._name = name
        self._options = options
        self._verify = verify
        self._authorization_params = authorization_params or (lambda _options: {})
        self._user_profile = user_profile or _no_profile

        self._oauth2 = OAuth2Client(
            options.client_id,
            options.client_secret,
            options.authorization_url,
            options.token_url,
            options.custom_headers,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> StrategyOptions:
        return self._options

    @property
    def oauth2(self) -> OAuth2Client:
        return self._oauth2

    # ── Leg 1: redirect ─────────────────────────────────────────────────

    def _request_options(self, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Strategy-level defaults overlaid by the request's own options."""
        merged: Dict[str, Any] = {}
        if self._options.force_verify is not None:
            merged["force_verify"] = self._options.force_verify
        if self._options.response_type is not None:
            merged["response_type"] = self._options.response_type
        merged.update(options or {})
        return merged

    def authorization_url(
        self, options: Optional[Dict[str, Any]] = None, state: Optional[str] = None
    ) -> str:
        request_options = self._request_options(options)

        params = dict(self._authorization_params(request_options))
        # The callback leg only understands authorization codes
        params["response_type"] = "code"
        params["redirect_uri"] = request_options.get("callback_url") or self._options.callback_url

        scope = request_options.get("scope") or self._options.scope
        if scope:
            if isinstance(scope, (list, tuple)):
                scope = self._options.scope_separator.join(scope)
            params["scope"] = scope

        state = state or request_options.get("state")
        if state:
            params["state"] = state

        return self._oauth2.get_authorize_url(params)

    # ── Leg 2: callback ─────────────────────────────────────────────────

    async def authenticate(
        self,
        query: Mapping[str, str],
        options: Optional[Dict[str, Any]] = None,
    ) -> AuthResult:
        options = options or {}

        error = query.get("error")
        if error:
            if error == "access_denied":
                logger.info("%s login denied by user", self._name)
                return AuthResult.fail(query.get("error_description") or error)
            raise AuthorizationError(
                query.get("error_description"), error, query.get("error_uri")
            )

        code = query.get("code")
        if not code:
            return AuthResult.redirect(self.authorization_url(options))

        access_token, refresh_token, _ = await self._exchange_code(code, options)

        profile = None
        if not self._options.skip_user_profile:
            profile = await self._user_profile(access_token)

        user = self._verify(access_token, refresh_token, profile)
        if inspect.isawaitable(user):
            user = await user

        if not user:
            logger.info("%s login rejected by verify callback", self._name)
            return AuthResult.fail()
        logger.info("%s login succeeded", self._name)
        return AuthResult.success(user)

    async def _exchange_code(self, code: str, options: Dict[str, Any]):
        callback_url = options.get("callback_url") or self._options.callback_url
        try:
            access_token, refresh_token, params = await self._oauth2.get_oauth_access_token(
                code,
                {"grant_type": "authorization_code", "redirect_uri": callback_url},
            )
        except OAuth2RequestError as exc:
            logger.warning("%s token exchange failed: HTTP %d", self._name, exc.status_code)
            raise self._token_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s token exchange failed: %s", self._name, exc)
            raise InternalOAuthError("Failed to obtain access token", exc) from exc

        if not access_token:
            # 200 responses can still carry an OAuth2 error body
            raise TokenError.from_response(params) or InternalOAuthError(
                "Failed to obtain access token"
            )
        return access_token, refresh_token, params

    @staticmethod
    def _token_error(exc: OAuth2RequestError) -> Exception:
        try:
            data = json.loads(exc.data)
        except ValueError:
            data = None
        return TokenError.from_response(data) or InternalOAuthError(
            "Failed to obtain access token", exc
        )

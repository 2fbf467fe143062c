"""
OAuth2Client — provider-agnostic OAuth2 transport.

Builds authorization URLs, exchanges codes (or refresh tokens) for access
tokens, and performs authenticated GETs against provider APIs.
Nothing here knows about any particular provider.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

import httpx

from strategies.errors import OAuth2RequestError

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Thin async OAuth2 client over httpx."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authorize_url: str,
        access_token_url: str,
        custom_headers: Optional[Dict[str, str]] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._authorize_url = authorize_url
        self._access_token_url = access_token_url
        self._custom_headers = dict(custom_headers or {})
        self._transport = transport

        self._access_token_name = "access_token"
        self._auth_method = "Bearer"
        self._use_authorization_header_for_get = False

    # ── Credential placement ────────────────────────────────────────────

    @property
    def auth_method(self) -> str:
        return self._auth_method

    @property
    def uses_authorization_header_for_get(self) -> bool:
        return self._use_authorization_header_for_get

    def set_auth_method(self, auth_method: str) -> None:
        """Scheme label put in front of the token in the Authorization header."""
        self._auth_method = auth_method

    def set_access_token_name(self, name: str) -> None:
        """Query-parameter name used when the token is not sent as a header."""
        self._access_token_name = name

    def use_authorization_header_for_get(self, use_it: bool) -> None:
        """Send the token in the Authorization header on GET instead of the query string."""
        self._use_authorization_header_for_get = use_it

    def build_auth_header(self, token: str) -> str:
        return f"{self._auth_method} {token}"

    # ── OAuth flow ──────────────────────────────────────────────────────

    def get_authorize_url(self, params: Optional[Dict[str, Any]] = None) -> str:
        query = {"client_id": self._client_id}
        for key, value in (params or {}).items():
            query[key] = str(value).lower() if isinstance(value, bool) else value
        return f"{self._authorize_url}?{urlencode(query)}"

    async def get_oauth_access_token(
        self, code: str, params: Optional[Dict[str, Any]] = None
    ) -> Tuple[Optional[str], Optional[str], Dict[str, Any]]:
        """
        Exchange an authorization code (or refresh token) for tokens.

        Parameters
        ----------
        code : str
            The authorization code, or a refresh token when
            ``params["grant_type"] == "refresh_token"``.
        params : dict
            Extra form fields (``grant_type``, ``redirect_uri``, …).

        Returns
        -------
        ``(access_token, refresh_token, results)`` where ``results`` is the
        full parsed token response.
        """
        form: Dict[str, Any] = dict(params or {})
        form["client_id"] = self._client_id
        form["client_secret"] = self._client_secret
        code_param = "refresh_token" if form.get("grant_type") == "refresh_token" else "code"
        form[code_param] = code

        body, _ = await self._request(
            "POST",
            self._access_token_url,
            data=form,
            headers={"Accept": "application/json"},
        )

        try:
            results = json.loads(body)
        except ValueError:
            # Some providers still answer with a form-encoded body
            results = dict(parse_qsl(body))
        if not isinstance(results, dict):
            results = {}

        access_token = results.pop("access_token", None)
        refresh_token = results.pop("refresh_token", None)
        return access_token, refresh_token, results

    async def get(self, url: str, access_token: Optional[str]) -> Tuple[str, httpx.Response]:
        """Authenticated GET. Returns ``(body_text, response)``."""
        headers: Dict[str, str] = {}
        params: Dict[str, str] = {}
        if access_token:
            if self._use_authorization_header_for_get:
                headers["Authorization"] = self.build_auth_header(access_token)
            else:
                params[self._access_token_name] = access_token
        return await self._request("GET", url, headers=headers, params=params)

    # ── Transport ───────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Tuple[str, httpx.Response]:
        all_headers = dict(self._custom_headers)
        all_headers.update(headers or {})

        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.request(
                method,
                url,
                headers=all_headers,
                params=params or None,
                data=data,
            )

        if not 200 <= resp.status_code < 300:
            logger.debug("%s %s → HTTP %d", method, url, resp.status_code)
            raise OAuth2RequestError(resp.status_code, resp.text)
        return resp.text, resp

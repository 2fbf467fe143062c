"""
Error types raised by the OAuth2 strategies.

Two families matter to callers:

* ``InternalOAuthError`` — the provider could not be reached or rejected
  the request. Always carries the underlying cause in ``oauth_error``.
* ``AuthorizationError`` / ``TokenError`` — the provider answered with an
  OAuth2 error response on the authorize or token endpoint.

A response that arrives but cannot be parsed is *not* wrapped: the raw
``ValueError`` / ``KeyError`` / ``IndexError`` surfaces unchanged.
"""

from __future__ import annotations

from typing import Any, Optional


class ConfigurationError(TypeError):
    """A strategy was constructed without a required option."""


class OAuth2RequestError(Exception):
    """Non-2xx response from an OAuth2 or API endpoint."""

    def __init__(self, status_code: int, data: str = "") -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.data = data


class InternalOAuthError(Exception):
    """Failure talking to the provider, wrapping the underlying cause."""

    def __init__(self, message: str, oauth_error: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.oauth_error = oauth_error

    def __str__(self) -> str:
        err = self.oauth_error
        if isinstance(err, OAuth2RequestError):
            return f"{self.message} (status: {err.status_code} data: {err.data})"
        if err is not None:
            return f"{self.message} ({err})"
        return self.message


class AuthorizationError(Exception):
    """The provider returned an error to the authorization redirect."""

    def __init__(
        self,
        message: Optional[str],
        code: str = "server_error",
        uri: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message or code)
        self.message = message
        self.code = code
        self.uri = uri
        if status is None:
            status = {
                "access_denied": 403,
                "server_error": 502,
                "temporarily_unavailable": 503,
            }.get(code, 500)
        self.status = status


class TokenError(Exception):
    """The token endpoint answered with an OAuth2 error body."""

    def __init__(
        self,
        message: Optional[str],
        code: str = "invalid_request",
        uri: Optional[str] = None,
        status: int = 500,
    ) -> None:
        super().__init__(message or code)
        self.message = message
        self.code = code
        self.uri = uri
        self.status = status

    @classmethod
    def from_response(cls, data: Any) -> Optional["TokenError"]:
        """Build a TokenError from a parsed error body, or None if it is not one."""
        if isinstance(data, dict) and data.get("error"):
            return cls(data.get("error_description"), data["error"], data.get("error_uri"))
        return None

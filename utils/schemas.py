"""
Pydantic schemas shared by the OAuth2 strategies.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Strategy configuration
# ═══════════════════════════════════════════════════════════════════════════════


class StrategyOptions(BaseModel):
    """
    Construction-time options for an OAuth2 strategy.

    Required fields are left optional here; the handshake driver checks
    them when the strategy is built so the error names the missing option.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    callback_url: Optional[str] = None
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None

    scope: Optional[Union[str, List[str]]] = None
    scope_separator: str = " "
    skip_user_profile: bool = False
    custom_headers: Dict[str, str] = Field(default_factory=dict)

    # Per-request defaults, overridden by request options
    force_verify: Optional[bool] = None
    response_type: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Normalized profile
# ═══════════════════════════════════════════════════════════════════════════════


class Profile(BaseModel):
    """User profile normalized from a provider's user-info response."""

    provider: str
    id: str
    username: str
    display_name: str
    email: Optional[str] = None

    raw_body: str              # verbatim response text
    parsed_json: Dict[str, Any]  # the provider's user record


# ═══════════════════════════════════════════════════════════════════════════════
# Authentication outcome
# ═══════════════════════════════════════════════════════════════════════════════


class AuthResult(BaseModel):
    """
    Result of one ``authenticate`` call.

    ``redirect`` carries ``redirect_url``; ``success`` carries the ``user``
    returned by the verify callback; ``fail`` carries ``info`` (a message
    or whatever the provider reported).
    """

    outcome: Literal["redirect", "success", "fail"]
    redirect_url: Optional[str] = None
    user: Any = None
    info: Any = None

    @classmethod
    def redirect(cls, url: str) -> "AuthResult":
        return cls(outcome="redirect", redirect_url=url)

    @classmethod
    def success(cls, user: Any, info: Any = None) -> "AuthResult":
        return cls(outcome="success", user=user, info=info)

    @classmethod
    def fail(cls, info: Any = None) -> "AuthResult":
        return cls(outcome="fail", info=info)

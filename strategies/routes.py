"""
Login API routes — redirect to the provider and handle its callback.

Route prefix: /auth
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import RedirectResponse

from config.settings import config
from strategies.base import BaseStrategy
from strategies.errors import AuthorizationError, InternalOAuthError, TokenError
from strategies.registry import StrategyRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# ── State token helpers (CSRF protection) ──────────────────────────────

_STATE_SECRET = config.oauth_state_secret
_STATE_TTL = config.oauth_state_ttl_seconds


def _sign(raw: bytes) -> str:
    return hmac.new(_STATE_SECRET.encode(), raw, hashlib.sha256).hexdigest()[:16]


def _create_state(strategy_name: str) -> str:
    """Create an opaque state string bound to the strategy, with expiry."""
    payload = json.dumps(
        {
            "strategy": strategy_name,
            "nonce": secrets.token_hex(8),
            "exp": int(time.time()) + _STATE_TTL,
        }
    )
    raw = payload.encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(raw)


def _verify_state(state: Optional[str], strategy_name: str) -> None:
    """Verify a state token issued for ``strategy_name``. Raises on failure."""
    try:
        if not state:
            raise ValueError("missing")
        parts = state.split(".", 1)
        if len(parts) != 2:
            raise ValueError("bad format")
        raw = urlsafe_b64decode(parts[0])
        if not hmac.compare_digest(parts[1].encode(), _sign(raw).encode()):
            raise ValueError("bad signature")
        payload = json.loads(raw)
        if payload.get("exp", 0) < time.time():
            raise ValueError("state expired")
        if payload.get("strategy") != strategy_name:
            raise ValueError("issued for another strategy")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid or expired OAuth state: {exc}",
        )


def _get_strategy(name: str) -> BaseStrategy:
    strategy = StrategyRegistry().get(name)
    if not strategy:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Strategy '{name}' not found or not configured",
        )
    return strategy


# ── Routes ─────────────────────────────────────────────────────────────


@router.get("/providers")
async def list_providers() -> list[dict]:
    """List the registered login strategies."""
    return StrategyRegistry().list_strategies()


@router.get("/{name}")
async def begin_login(
    name: str,
    force_verify: Optional[bool] = Query(None),
    scope: Optional[str] = Query(None),
) -> RedirectResponse:
    """Redirect the browser to the provider's consent page."""
    strategy = _get_strategy(name)

    options: Dict[str, Any] = {}
    if force_verify is not None:
        options["force_verify"] = force_verify
    if scope:
        options["scope"] = scope.split()

    url = strategy.authorization_url(options, _create_state(name))
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/{name}/callback")
async def login_callback(name: str, request: Request):
    """
    OAuth callback — the provider redirects here after consent.

    Exchanges the code, loads the profile and runs the verify callback.
    """
    strategy = _get_strategy(name)
    query = dict(request.query_params)

    # Error redirects are reported as-is; only code redirects need state
    if not query.get("error"):
        _verify_state(query.get("state"), name)

    try:
        result = await strategy.authenticate(query)
    except AuthorizationError as exc:
        logger.warning("%s authorization error: %s", name, exc.code)
        raise HTTPException(status.HTTP_403_FORBIDDEN, str(exc))
    except TokenError as exc:
        logger.warning("%s token error: %s", name, exc.code)
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc))
    except InternalOAuthError as exc:
        logger.error("%s provider call failed: %s", name, exc)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, exc.message)
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        # Provider answered, but not with a usable user record
        logger.error("%s returned a malformed profile: %r", name, exc)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, "Malformed profile response")

    if result.outcome == "redirect":
        return RedirectResponse(result.redirect_url, status_code=status.HTTP_302_FOUND)
    if result.outcome == "fail":
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            result.info or "Authentication failed",
        )
    return {"provider": name, "user": jsonable_encoder(result.user)}

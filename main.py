"""
Twitch login service — application entry point.
"""

from __future__ import annotations

import logging
import sys
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config.settings import config
from strategies.registry import StrategyRegistry
from strategies.routes import router as auth_router
from strategies.twitch import TwitchStrategy
from utils.schemas import Profile

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


async def verify_twitch_user(access_token: str, refresh_token: str, profile: Profile) -> dict:
    """Default verify callback: the normalized profile is the user."""
    return profile.model_dump(exclude={"raw_body", "parsed_json"})


def register_strategies(registry: StrategyRegistry) -> None:
    """Register every strategy that has credentials configured."""
    if config.is_twitch_configured():
        registry.use(TwitchStrategy(config.twitch_strategy_options(), verify_twitch_user))
    else:
        logger.warning(
            "Strategy twitch skipped — not configured (missing client_id/secret)"
        )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Twitch Login",
        version="1.0.0",
        description="Log in with Twitch over OAuth2.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response

    app.include_router(auth_router, prefix="/auth")

    register_strategies(StrategyRegistry())
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )

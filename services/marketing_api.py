"""
Marketing automation API.

FastAPI app exposing the dashboard REST surface under /api plus /health.
Run with ``python -m services.marketing_api`` or ``uvicorn services.marketing_api:app``.
"""

import asyncio
import logging
import os
import sys
import time
from typing import Any, Dict, Optional

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from agents.responder import get_ai_agent_service
from services import (
    ai_agent_endpoints,
    analytics_endpoints,
    auth_endpoints,
    campaign_endpoints,
    user_endpoints,
    webhook_endpoints,
)
from services.config import Settings, get_settings
from services.errors import register_exception_handlers, utc_timestamp
from services.logging_setup import setup_logging
from services.middleware import install_middleware

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


# ==========================================================
# Process-level crash handling
# ==========================================================

def _terminate(reason: str, exc: Optional[BaseException] = None) -> None:
    logger.critical(reason, exc_info=exc)
    logging.shutdown()
    os._exit(1)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    _terminate(f"Unhandled async exception: {context.get('message', exc)}", exc)


def _uncaught_exception_hook(exc_type, exc, tb) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    _terminate(f"Uncaught exception: {exc}", exc)


def install_crash_handlers() -> None:
    """Log CRITICAL and exit(1) on any exception nothing else handled."""
    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)
    sys.excepthook = _uncaught_exception_hook


# ==========================================================
# App factory
# ==========================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Painel Integrado API", version=settings.api_version)

    register_exception_handlers(app)
    install_middleware(app, settings)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api = APIRouter(prefix="/api")
    api.include_router(webhook_endpoints.router)
    api.include_router(ai_agent_endpoints.router)
    api.include_router(campaign_endpoints.router)
    api.include_router(analytics_endpoints.router)
    api.include_router(auth_endpoints.router)
    api.include_router(user_endpoints.router)
    app.include_router(api)

    @app.on_event("startup")
    async def startup():
        setup_logging(settings)
        install_crash_handlers()

        if await get_ai_agent_service().cache.connect():
            logger.info("✅ Redis response cache ready")
        else:
            logger.warning("⚠️  Redis unavailable, AI responses will not be cached")

        logger.info(f"🚀 API listening on {settings.host}:{settings.port}")
        logger.info(f"📱 Environment: {settings.environment}")

    @app.on_event("shutdown")
    async def shutdown():
        await get_ai_agent_service().cache.close()
        logger.info("API shut down")

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "timestamp": utc_timestamp(),
            "uptime": time.monotonic() - STARTED_AT,
            "environment": settings.environment,
            "version": settings.api_version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)

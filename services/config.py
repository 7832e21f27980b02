"""Runtime settings for the marketing automation backend.

Every third-party credential and server knob is read from the environment
(optionally seeded from a local ``.env`` file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    environment: str = "development"
    api_version: str = "v1"
    cors_origin: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    # Rate limiting / body size
    rate_limit_window_ms: int = 900000
    rate_limit_max_requests: int = 100
    max_body_bytes: int = 10 * 1024 * 1024

    # Response cache
    redis_url: str = "redis://localhost:6379"
    redis_enabled: bool = True
    ai_response_cache_ttl: int = 3600

    # LLM provider
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: Optional[str] = None

    # Auth
    jwt_secret: str = "painel-dev-secret-change-me"
    jwt_expiry_hours: int = 24

    # WhatsApp (Z-API)
    zapi_base_url: str = "https://api.z-api.io/instances"
    zapi_instance_id: str = ""
    zapi_token: str = ""

    # Meta (Facebook / Instagram)
    meta_access_token: str = ""
    meta_verify_token: str = ""
    meta_page_id: str = ""
    instagram_business_id: str = ""
    meta_api_version: str = "v18.0"

    # Email
    sendgrid_api_key: str = ""

    http_timeout: float = 30.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV", "development"),
            api_version=os.getenv("API_VERSION", "v1"),
            cors_origin=os.getenv("CORS_ORIGIN", "http://localhost:3000"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR", "logs"),
            log_to_file=_env_bool("LOG_TO_FILE", True),
            rate_limit_window_ms=int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000")),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100")),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024))),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
            redis_enabled=_env_bool("REDIS_ENABLED", True),
            ai_response_cache_ttl=int(os.getenv("AI_RESPONSE_CACHE_TTL", "3600")),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_model=os.getenv("OPENAI_MODEL") or None,
            jwt_secret=os.getenv("JWT_SECRET", "painel-dev-secret-change-me"),
            jwt_expiry_hours=int(os.getenv("JWT_EXPIRY_HOURS", "24")),
            zapi_base_url=os.getenv("ZAPI_BASE_URL", "https://api.z-api.io/instances"),
            zapi_instance_id=os.getenv("ZAPI_INSTANCE_ID", ""),
            zapi_token=os.getenv("ZAPI_TOKEN", ""),
            meta_access_token=os.getenv("META_ACCESS_TOKEN", ""),
            meta_verify_token=os.getenv("META_VERIFY_TOKEN", ""),
            meta_page_id=os.getenv("META_PAGE_ID", ""),
            instagram_business_id=os.getenv("INSTAGRAM_BUSINESS_ID", ""),
            meta_api_version=os.getenv("META_API_VERSION", "v18.0"),
            sendgrid_api_key=os.getenv("SENDGRID_API_KEY", ""),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process (``.env`` values never override real env vars)."""
    load_dotenv()
    return Settings.from_env()

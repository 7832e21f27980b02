"""
Redis caching layer for agent replies.

Replies are cached per agent and message prefix for one hour. The cache is
best-effort: a missing or failing Redis never fails a request, it just turns
every lookup into a miss.

Usage:
    from services.response_cache import ResponseCache

    cache = ResponseCache()
    cached = await cache.get_response("vendedor", "Quero comprar")
    if cached is None:
        response = await generate(...)
        await cache.set_response("vendedor", "Quero comprar", response)
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from services.config import get_settings

logger = logging.getLogger(__name__)


class ResponseCache:
    """Redis-backed cache for AI agent responses."""

    DEFAULT_TTL = 60 * 60  # 1 hour
    PREFIX = "ai_response:"
    MESSAGE_KEY_CHARS = 50

    def __init__(
        self,
        redis_url: Optional[str] = None,
        enabled: Optional[bool] = None,
        ttl: Optional[int] = None,
        client: Optional["redis.Redis"] = None,
    ):
        """
        Initialize cache.

        Args:
            redis_url: Redis connection URL. Defaults to the REDIS_URL setting.
            enabled: Whether caching is enabled. Defaults to REDIS_ENABLED.
            ttl: Expiry for cached responses, in seconds.
            client: Pre-built async Redis client (skips URL connection).
        """
        settings = get_settings()
        self.redis_url = redis_url or settings.redis_url
        self.enabled = settings.redis_enabled if enabled is None else enabled
        self.ttl = ttl or settings.ai_response_cache_ttl or self.DEFAULT_TTL
        self._redis: Optional["redis.Redis"] = client
        self._stats = {"hits": 0, "misses": 0, "errors": 0}

    async def connect(self) -> bool:
        """Open and ping the connection. Disables the cache on failure."""
        r = await self._get_redis()
        return r is not None

    async def _get_redis(self) -> Optional["redis.Redis"]:
        if not self.enabled:
            return None

        if self._redis is None:
            try:
                client = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await client.ping()
                self._redis = client
                logger.info(f"Response cache connected (redis={self.redis_url})")
            except Exception as e:
                logger.error(f"Redis connection failed, response cache disabled: {e}")
                self.enabled = False
                return None

        return self._redis

    @classmethod
    def build_key(cls, agent_name: str, message: str) -> str:
        """``ai_response:{agent}:{first 50 chars of base64(message)}``."""
        encoded = base64.b64encode(message.encode("utf-8")).decode("ascii")
        return f"{cls.PREFIX}{agent_name}:{encoded[:cls.MESSAGE_KEY_CHARS]}"

    async def get_response(self, agent_name: str, message: str) -> Optional[Dict[str, Any]]:
        """Return the cached response payload, or None on miss/unavailable cache."""
        r = await self._get_redis()
        if not r:
            return None

        key = self.build_key(agent_name, message)
        try:
            data = await r.get(key)
            if data:
                self._stats["hits"] += 1
                return json.loads(data)
            self._stats["misses"] += 1
            return None
        except Exception as e:
            self._stats["errors"] += 1
            logger.warning(f"Cache get_response failed: {e}")
            return None

    async def set_response(self, agent_name: str, message: str, payload: Dict[str, Any]) -> bool:
        """Store a response payload with the configured TTL."""
        r = await self._get_redis()
        if not r:
            return False

        key = self.build_key(agent_name, message)
        try:
            await r.set(key, json.dumps(payload, ensure_ascii=False), ex=self.ttl)
            return True
        except Exception as e:
            self._stats["errors"] += 1
            logger.warning(f"Cache set_response failed: {e}")
            return False

    async def invalidate_agent(self, agent_name: str) -> int:
        """Delete every cached response for one agent. Returns the number of keys removed."""
        r = await self._get_redis()
        if not r:
            return 0

        removed = 0
        try:
            async for key in r.scan_iter(match=f"{self.PREFIX}{agent_name}:*"):
                removed += await r.delete(key)
        except Exception as e:
            self._stats["errors"] += 1
            logger.warning(f"Cache invalidate_agent failed: {e}")
        return removed

    def get_stats(self) -> Dict[str, Any]:
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "enabled": self.enabled,
            "hit_rate": self._stats["hits"] / total if total else 0.0,
        }

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

"""Shared test setup: isolated settings, no Redis, no log files."""

import os

import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ["REDIS_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("OPENAI_MODEL", None)

from agents.responder import set_ai_agent_service  # noqa: E402
from services.config import get_settings  # noqa: E402
from services.llm_manager import LLMManager  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_singletons():
    get_settings.cache_clear()
    LLMManager._instance = None
    set_ai_agent_service(None)
    yield
    get_settings.cache_clear()
    LLMManager._instance = None
    set_ai_agent_service(None)


class DummyRedis:
    """In-memory stand-in for ``redis.asyncio.Redis``."""

    def __init__(self, fail: bool = False):
        self.store = {}
        self.expiry = {}
        self.fail = fail

    async def ping(self):
        return True

    async def get(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise ConnectionError("redis down")
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match=None):
        prefix = (match or "").rstrip("*")
        for key in list(self.store):
            if key.startswith(prefix):
                yield key

    async def aclose(self):
        return None


@pytest.fixture
def dummy_redis():
    return DummyRedis()

"""Singleton LLM manager with per-agent, config-aware client caching."""

import hashlib
import json
import logging
import threading
from typing import Any, Dict, Optional

from langchain_openai import ChatOpenAI

from agents.models import AgentConfig
from services.config import Settings, get_settings

logger = logging.getLogger(__name__)

PRESENCE_PENALTY = 0.1
FREQUENCY_PENALTY = 0.1


class LLMManager:
    """Thread-safe singleton holding one cached ChatOpenAI client per agent config."""

    _instance = None
    _lock = threading.Lock()

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self.clients: Dict[str, ChatOpenAI] = {}
        self.client_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "LLMManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = LLMManager()
        return cls._instance

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def build_config(self, agent: AgentConfig) -> Dict[str, Any]:
        """Resolve the provider config for an agent (env overrides the model)."""
        settings = self.settings
        return {
            "base_url": settings.openai_base_url,
            "api_key": settings.openai_api_key or "",
            "model": settings.openai_model or agent.model,
            "parameters": {
                "temperature": agent.temperature,
                "max_tokens": agent.max_tokens,
                "presence_penalty": PRESENCE_PENALTY,
                "frequency_penalty": FREQUENCY_PENALTY,
            },
        }

    def get_client(self, agent: AgentConfig) -> ChatOpenAI:
        """Return the cached client for this agent, creating it when its config changes."""
        config = self.build_config(agent)
        config_hash = self._hash_config(config)

        with self.client_lock:
            client = self.clients.get(config_hash)
            if client is None:
                logger.info(
                    "Creating LLM client for agent %s (%s)", agent.name, config["model"]
                )
                client = self._create_client(config)
                self.clients[config_hash] = client
            return client

    def force_refresh(self) -> None:
        """Drop all cached clients so the next call rebuilds them."""
        with self.client_lock:
            self.clients.clear()
            logger.info("LLM client cache invalidated")

    def _hash_config(self, config: Dict[str, Any]) -> str:
        payload = json.dumps(config, sort_keys=True)
        return hashlib.sha256(payload.encode()).hexdigest()

    def _create_client(self, config: Dict[str, Any]) -> ChatOpenAI:
        parameters = config["parameters"]
        kwargs: Dict[str, Any] = {}
        if config.get("base_url"):
            kwargs["base_url"] = config["base_url"]
        # No retry policy: provider failures surface to the caller immediately
        return ChatOpenAI(
            api_key=config.get("api_key") or "sk-not-configured",
            model=config["model"],
            temperature=parameters["temperature"],
            max_tokens=parameters["max_tokens"],
            presence_penalty=parameters["presence_penalty"],
            frequency_penalty=parameters["frequency_penalty"],
            streaming=False,
            max_retries=0,
            **kwargs,
        )

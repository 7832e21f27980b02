"""
AI agent service: turns a user message into an agent reply.

Pipeline for one message:
1. Resolve the agent from the registry
2. Check the response cache
3. Assemble the prompt (instructions, history window, context, user turn)
4. Call the LLM
5. Score confidence and extract suggested actions from the reply
6. Cache the response
"""

import logging
import re
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from langchain_core.messages import AIMessage

from agents.context_manager import build_agent_messages
from agents.models import AIResponse, AgentConfig, ChatMessage
from agents.registry import AGENT_CAPABILITIES, get_agent, list_agents
from agents.utils import get_llm
from services.config import get_settings
from services.errors import AgentNotFoundError, ExternalServiceError
from services.logging_setup import log_ai_activity, log_performance
from services.response_cache import ResponseCache

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Desculpe, não consegui processar sua mensagem."

BASE_CONFIDENCE = 0.5
FINISHED_BONUS = 0.3
LENGTH_BONUS = 0.2
LENGTH_BONUS_THRESHOLD = 100

ACTION_PATTERNS = [
    re.compile(r"(?:recomendo|sugiro|deveria|pode|tente)[\s\w]*([^.!?]+)", re.IGNORECASE),
    re.compile(r"(?:próximo passo|próxima etapa)[\s:]*([^.!?]+)", re.IGNORECASE),
    re.compile(r"(?:ação|fazer|executar)[\s:]*([^.!?]+)", re.IGNORECASE),
]
MAX_ACTIONS_PER_PATTERN = 3
MAX_SUGGESTED_ACTIONS = 5


def calculate_confidence(ai_message: Optional[AIMessage]) -> float:
    """
    Heuristic confidence for a generation.

    0.5 base, +0.3 when the model stopped on its own, +0.2 when the content
    is longer than 100 characters, capped at 1.0. No generation scores 0.
    """
    if ai_message is None:
        return 0.0

    confidence = BASE_CONFIDENCE
    if ai_message.response_metadata.get("finish_reason") == "stop":
        confidence += FINISHED_BONUS

    content = ai_message.content if isinstance(ai_message.content, str) else ""
    if len(content) > LENGTH_BONUS_THRESHOLD:
        confidence += LENGTH_BONUS

    return min(confidence, 1.0)


def extract_suggested_actions(message: str) -> List[str]:
    """Pull action-like phrases out of a reply (full matched text, at most 5)."""
    actions: List[str] = []
    for pattern in ACTION_PATTERNS:
        matches = [m.group(0) for m in pattern.finditer(message)]
        actions.extend(matches[:MAX_ACTIONS_PER_PATTERN])
    return actions[:MAX_SUGGESTED_ACTIONS]


def _tokens_used(ai_message: AIMessage) -> int:
    usage = ai_message.response_metadata.get("token_usage") or {}
    total = usage.get("total_tokens")
    if total:
        return int(total)
    if ai_message.usage_metadata:
        return int(ai_message.usage_metadata.get("total_tokens") or 0)
    return 0


class AIAgentService:
    """Generates replies for registered agents, memoized through the response cache."""

    def __init__(self, cache: Optional[ResponseCache] = None):
        self.cache = cache if cache is not None else ResponseCache()

    def get_available_agents(self) -> List[str]:
        return list_agents()

    def _require_agent(self, agent_name: str) -> AgentConfig:
        agent = get_agent(agent_name)
        if agent is None:
            raise AgentNotFoundError(agent_name)
        return agent

    def get_agent_capabilities(self, agent_name: str) -> Dict[str, Any]:
        agent = self._require_agent(agent_name)
        return {
            "name": agent.name,
            "role": agent.role,
            "personality": agent.personality,
            "capabilities": list(AGENT_CAPABILITIES.get(agent.name, [])),
        }

    async def process_message(
        self,
        agent_name: str,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        conversation_history: Optional[Sequence[ChatMessage]] = None,
    ) -> AIResponse:
        """
        Generate (or fetch from cache) the reply of one agent.

        Raises:
            AgentNotFoundError: agent_name is not registered
            ExternalServiceError: the LLM provider call failed
        """
        agent = self._require_agent(agent_name)

        cached = await self.cache.get_response(agent_name, message)
        if cached is not None:
            logger.info(f"Cache hit for agent {agent_name}")
            return AIResponse.model_validate(cached)

        messages = build_agent_messages(agent, message, context, conversation_history)

        log_ai_activity(agent_name, "processing_message", message)
        started = time.perf_counter()

        try:
            ai_message = await get_llm(agent).ainvoke(messages)
        except Exception as e:
            logger.error(f"Agent {agent_name} failed: {e}")
            raise ExternalServiceError("OpenAI", f"Falha ao gerar resposta: {e}") from e

        processing_ms = int((time.perf_counter() - started) * 1000)
        model = get_settings().openai_model or agent.model
        log_performance("llm_call", processing_ms, {"agent": agent_name, "model": model})

        content = ai_message.content if isinstance(ai_message.content, str) else ""
        reply = content or FALLBACK_REPLY

        response = AIResponse(
            message=reply,
            agent=agent_name,
            confidence=calculate_confidence(ai_message),
            suggested_actions=extract_suggested_actions(reply),
            metadata={
                "model": model,
                "tokensUsed": _tokens_used(ai_message),
                "processingTime": processing_ms,
            },
        )

        await self.cache.set_response(agent_name, message, response.to_wire())

        log_ai_activity(agent_name, "response_generated", message, reply)
        return response


_service: Optional[AIAgentService] = None


def get_ai_agent_service() -> AIAgentService:
    """Process-wide service instance (shared response cache)."""
    global _service
    if _service is None:
        _service = AIAgentService()
    return _service


def set_ai_agent_service(service: Optional[AIAgentService]) -> None:
    global _service
    _service = service

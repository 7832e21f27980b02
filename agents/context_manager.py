"""
Prompt assembly for agent calls.

Message order sent to the model:
1. Agent instructions (system)
2. Most recent conversation history (sliding window)
3. Optional request context, serialized as compact JSON (system)
4. The user message
"""

import json
from typing import Any, List, Mapping, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from agents.models import AgentConfig, ChatMessage

MAX_HISTORY_MESSAGES = 10
CONTEXT_PREFIX = "Contexto adicional: "


def apply_sliding_window(
    history: Sequence[ChatMessage],
    max_messages: int = MAX_HISTORY_MESSAGES,
) -> List[ChatMessage]:
    """Keep only the last ``max_messages`` turns."""
    if not history or max_messages <= 0:
        return []
    return list(history[-max_messages:])


def to_langchain_message(message: ChatMessage) -> BaseMessage:
    if message.role == "system":
        return SystemMessage(content=message.content)
    if message.role == "assistant":
        return AIMessage(content=message.content)
    return HumanMessage(content=message.content)


def serialize_context(context: Mapping[str, Any]) -> str:
    return json.dumps(context, ensure_ascii=False, separators=(",", ":"), default=str)


def build_agent_messages(
    agent: AgentConfig,
    message: str,
    context: Optional[Mapping[str, Any]] = None,
    conversation_history: Optional[Sequence[ChatMessage]] = None,
) -> List[BaseMessage]:
    messages: List[BaseMessage] = [SystemMessage(content=agent.instructions)]

    for turn in apply_sliding_window(conversation_history or []):
        messages.append(to_langchain_message(turn))

    if context is not None:
        messages.append(SystemMessage(content=CONTEXT_PREFIX + serialize_context(context)))

    messages.append(HumanMessage(content=message))
    return messages

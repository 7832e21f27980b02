"""Tests for prompt assembly."""

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from agents.context_manager import (
    CONTEXT_PREFIX,
    apply_sliding_window,
    build_agent_messages,
    serialize_context,
)
from agents.models import ChatMessage
from agents.sales_agent import SALES_AGENT


def _history(n):
    return [
        ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}")
        for i in range(n)
    ]


def test_sliding_window_keeps_last_ten():
    window = apply_sliding_window(_history(15))
    assert len(window) == 10
    assert window[0].content == "turn 5"
    assert window[-1].content == "turn 14"


def test_sliding_window_short_history_untouched():
    assert [m.content for m in apply_sliding_window(_history(3))] == ["turn 0", "turn 1", "turn 2"]
    assert apply_sliding_window([]) == []


def test_message_order_without_context_or_history():
    messages = build_agent_messages(SALES_AGENT, "Olá")
    assert len(messages) == 2
    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == SALES_AGENT.instructions
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "Olá"


def test_message_order_with_history_and_context():
    context = {"platform": "whatsapp", "contact": {"name": "Ana"}}
    messages = build_agent_messages(SALES_AGENT, "Quero comprar", context, _history(12))

    # system + 10 history + context + user
    assert len(messages) == 13
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "turn 2"
    assert isinstance(messages[2], AIMessage)
    assert isinstance(messages[11], SystemMessage)
    assert messages[11].content == CONTEXT_PREFIX + serialize_context(context)
    assert messages[-1].content == "Quero comprar"


def test_empty_context_still_added():
    messages = build_agent_messages(SALES_AGENT, "Oi", context={})
    assert messages[1].content == "Contexto adicional: {}"


def test_serialize_context_is_compact_and_keeps_accents():
    assert serialize_context({"a": 1, "cidade": "São Paulo"}) == '{"a":1,"cidade":"São Paulo"}'


def test_system_history_turn_maps_to_system_message():
    history = [ChatMessage(role="system", content="nota")]
    messages = build_agent_messages(SALES_AGENT, "Oi", conversation_history=history)
    assert isinstance(messages[1], SystemMessage)

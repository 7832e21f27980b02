"""Tests for keyword-based agent selection."""

import pytest

from agents.registry import AGENT_REGISTRY, DEFAULT_AGENT
from agents.router import score_agents, select_best_agent


@pytest.mark.parametrize(
    "message,expected",
    [
        ("Qual o preço para comprar o plano anual?", "vendedor"),
        ("Estou com um problema, aparece um erro no login", "suporte"),
        ("Preciso de um post viral com hashtag para a campanha", "promoter"),
        ("Bom dia!", "suporte"),
        ("", "suporte"),
    ],
)
def test_select_best_agent(message, expected):
    assert select_best_agent(message) == expected


def test_selection_is_case_insensitive():
    assert select_best_agent("QUERO UM ORÇAMENTO E UMA PROPOSTA") == "vendedor"


def test_keyword_counts_once_even_when_repeated():
    scores = score_agents("venda venda venda venda")
    assert scores["vendedor"] == 1


def test_tie_keeps_earlier_agent_in_registry_order():
    # one sales keyword ("cliente") and one promoter keyword ("post")
    assert select_best_agent("cliente post") == "vendedor"
    # one support keyword ("bug") and one promoter keyword ("trend")
    assert select_best_agent("bug trend") == "suporte"


def test_higher_score_wins_over_registry_order():
    assert select_best_agent("cliente: conteúdo criativo para engajamento") == "promoter"


def test_whatsapp_context_forces_sales_agent():
    message = "Tenho um problema e um erro, mas quero falar com vendas"
    assert select_best_agent(message) == "suporte"
    assert select_best_agent(message, {"platform": "whatsapp"}) == "vendedor"


def test_whatsapp_override_requires_vend_substring():
    assert select_best_agent("tenho um problema", {"platform": "whatsapp"}) == "suporte"


def test_other_platforms_do_not_override():
    message = "erro ao vender"
    assert select_best_agent(message, {"platform": "facebook"}) == "suporte"


def test_result_is_always_registered_and_deterministic():
    for message in ["", "???", "preço", "tutorial", "hashtag", "vend"]:
        first = select_best_agent(message)
        assert first in AGENT_REGISTRY
        assert select_best_agent(message) == first


def test_default_agent_is_support():
    assert DEFAULT_AGENT == "suporte"

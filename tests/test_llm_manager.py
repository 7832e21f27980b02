from unittest.mock import MagicMock, patch

from agents.promoter_agent import PROMOTER_AGENT
from agents.sales_agent import SALES_AGENT
from services.config import Settings
from services.llm_manager import LLMManager


def setup_function():
    LLMManager._instance = None


def test_singleton_pattern():
    manager1 = LLMManager.get_instance()
    manager2 = LLMManager.get_instance()

    assert manager1 is manager2


def test_build_config_uses_agent_parameters():
    manager = LLMManager(settings=Settings(openai_api_key="sk-test"))
    config = manager.build_config(SALES_AGENT)

    assert config["model"] == "gpt-4"
    assert config["api_key"] == "sk-test"
    assert config["parameters"] == {
        "temperature": 0.7,
        "max_tokens": 1000,
        "presence_penalty": 0.1,
        "frequency_penalty": 0.1,
    }


def test_model_override_from_settings():
    manager = LLMManager(settings=Settings(openai_model="gpt-4o-mini"))
    assert manager.build_config(SALES_AGENT)["model"] == "gpt-4o-mini"


@patch("services.llm_manager.ChatOpenAI")
def test_client_caching(mock_chat_openai):
    mock_chat_openai.side_effect = [MagicMock(name="sales"), MagicMock(name="promoter")]
    manager = LLMManager(settings=Settings(openai_api_key="sk-test"))

    client1 = manager.get_client(SALES_AGENT)
    client2 = manager.get_client(SALES_AGENT)
    client3 = manager.get_client(PROMOTER_AGENT)

    assert client1 is client2
    assert client3 is not client1
    assert mock_chat_openai.call_count == 2


@patch("services.llm_manager.ChatOpenAI")
def test_force_refresh(mock_chat_openai):
    mock_chat_openai.side_effect = [MagicMock(name="client1"), MagicMock(name="client2")]
    manager = LLMManager(settings=Settings(openai_api_key="sk-test"))

    first = manager.get_client(SALES_AGENT)
    manager.force_refresh()
    second = manager.get_client(SALES_AGENT)

    assert first is not second


@patch("services.llm_manager.ChatOpenAI")
def test_client_built_without_retries(mock_chat_openai):
    manager = LLMManager(settings=Settings(openai_api_key="sk-test"))
    manager.get_client(SALES_AGENT)

    kwargs = mock_chat_openai.call_args.kwargs
    assert kwargs["max_retries"] == 0
    assert kwargs["presence_penalty"] == 0.1
    assert kwargs["frequency_penalty"] == 0.1
    assert kwargs["max_tokens"] == 1000
    assert "base_url" not in kwargs


@patch("services.llm_manager.ChatOpenAI")
def test_base_url_passed_when_configured(mock_chat_openai):
    manager = LLMManager(
        settings=Settings(openai_api_key="sk-test", openai_base_url="http://localhost:8001/v1")
    )
    manager.get_client(SALES_AGENT)

    assert mock_chat_openai.call_args.kwargs["base_url"] == "http://localhost:8001/v1"

from langchain_openai import ChatOpenAI

from agents.models import AgentConfig


def get_llm(agent: AgentConfig) -> ChatOpenAI:
    """
    Get the ChatOpenAI client configured for an agent.

    Clients are cached by LLMManager and rebuilt only when the resolved
    provider config (model, temperature, token limit, credentials) changes.
    """
    from services.llm_manager import LLMManager

    return LLMManager.get_instance().get_client(agent)

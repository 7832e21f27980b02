"""Static agent registry.

Insertion order matters: it is the iteration order used by the selector, so
on a score tie the agent listed first wins.
"""

from typing import Dict, List, Optional

from agents.models import AgentConfig
from agents.promoter_agent import PROMOTER_AGENT, PROMOTER_CAPABILITIES, PROMOTER_KEYWORDS
from agents.sales_agent import SALES_AGENT, SALES_CAPABILITIES, SALES_KEYWORDS
from agents.support_agent import SUPPORT_AGENT, SUPPORT_CAPABILITIES, SUPPORT_KEYWORDS

AGENT_REGISTRY: Dict[str, AgentConfig] = {
    SALES_AGENT.name: SALES_AGENT,
    SUPPORT_AGENT.name: SUPPORT_AGENT,
    PROMOTER_AGENT.name: PROMOTER_AGENT,
}

AGENT_KEYWORDS: Dict[str, List[str]] = {
    SALES_AGENT.name: SALES_KEYWORDS,
    SUPPORT_AGENT.name: SUPPORT_KEYWORDS,
    PROMOTER_AGENT.name: PROMOTER_KEYWORDS,
}

AGENT_CAPABILITIES: Dict[str, List[str]] = {
    SALES_AGENT.name: SALES_CAPABILITIES,
    SUPPORT_AGENT.name: SUPPORT_CAPABILITIES,
    PROMOTER_AGENT.name: PROMOTER_CAPABILITIES,
}

DEFAULT_AGENT = SUPPORT_AGENT.name
SALES_AGENT_NAME = SALES_AGENT.name


def get_agent(name: str) -> Optional[AgentConfig]:
    return AGENT_REGISTRY.get(name)


def list_agents() -> List[str]:
    return list(AGENT_REGISTRY)

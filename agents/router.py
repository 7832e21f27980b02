import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from agents.registry import AGENT_KEYWORDS, DEFAULT_AGENT, SALES_AGENT_NAME

logger = logging.getLogger(__name__)

# Platform-specific overrides: (platform, substring) -> agent
PLATFORM_OVERRIDES = {
    ("whatsapp", "vend"): SALES_AGENT_NAME,
}


def score_agents(message: str) -> Dict[str, int]:
    """
    Count how many of each agent's keywords appear in the message.

    Each keyword counts at most once, regardless of how often it repeats.
    """
    message_lower = message.lower()
    return {
        agent: sum(1 for keyword in keywords if keyword in message_lower)
        for agent, keywords in AGENT_KEYWORDS.items()
    }


def _pick_best(scores: Dict[str, int]) -> Tuple[str, int]:
    best_agent = DEFAULT_AGENT
    max_score = 0
    # Strictly greater: ties keep the earlier agent (registry order)
    for agent, score in scores.items():
        if score > max_score:
            max_score = score
            best_agent = agent
    return best_agent, max_score


def select_best_agent(message: str, context: Optional[Mapping[str, Any]] = None) -> str:
    """
    Pick the agent that should answer a free-text message.

    Keyword scoring first, then context overrides (e.g. sales talk arriving
    on WhatsApp always goes to the sales agent). Never fails; the result is
    always a registered agent name.
    """
    best_agent, max_score = _pick_best(score_agents(message))

    platform = context.get("platform") if context else None
    if platform:
        message_lower = message.lower()
        for (override_platform, needle), agent in PLATFORM_OVERRIDES.items():
            if platform == override_platform and needle in message_lower:
                best_agent = agent

    logger.info(f"Agent selected: {best_agent} (score: {max_score})")
    return best_agent

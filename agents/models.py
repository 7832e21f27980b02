from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class AgentConfig:
    """Persona and model parameters for one agent. Defined once at import time."""

    name: str
    role: str
    personality: str
    instructions: str
    model: str
    temperature: float
    max_tokens: int


class ChatMessage(BaseModel):
    """A single turn of conversation history."""

    role: Literal["system", "user", "assistant"]
    content: str
    timestamp: Optional[datetime] = None


class AIResponse(BaseModel):
    """Reply produced by an agent; serialized in camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    agent: str
    confidence: float
    suggested_actions: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

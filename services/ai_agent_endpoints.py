"""
AI agent endpoints: listing, capabilities, agent selection and chat.

Mounted at /api/ai-agent. The ``AIAgentService`` is injected via
``Depends(get_ai_agent_service)`` so tests can override it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agents.models import ChatMessage
from agents.responder import AIAgentService, get_ai_agent_service
from agents.router import select_best_agent
from services import mock_data
from services.errors import ValidationError
from services.responses import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-agent", tags=["ai-agent"])


# ------------------------------------------------------------------
# Pydantic models
# ------------------------------------------------------------------

class AgentMessageRequest(BaseModel):
    message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None
    conversationHistory: Optional[List[ChatMessage]] = None


class SelectAgentRequest(BaseModel):
    message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None


class AgentTestRequest(BaseModel):
    messages: Optional[List[str]] = Field(default=None)


def _require_message(message: Optional[str]) -> str:
    if not message:
        raise ValidationError("Mensagem é obrigatória")
    return message


# ------------------------------------------------------------------
# Routes
# ------------------------------------------------------------------

@router.get("")
async def list_agents(service: AIAgentService = Depends(get_ai_agent_service)):
    agents = service.get_available_agents()
    return success({"agents": agents, "total": len(agents)})


@router.get("/stats")
async def agent_stats(service: AIAgentService = Depends(get_ai_agent_service)):
    return success(mock_data.agent_stats(service.get_available_agents()))


@router.get("/{agent_name}/capabilities")
async def agent_capabilities(
    agent_name: str, service: AIAgentService = Depends(get_ai_agent_service)
):
    return success(service.get_agent_capabilities(agent_name))


@router.post("/{agent_name}/message")
async def agent_message(
    agent_name: str,
    body: AgentMessageRequest,
    service: AIAgentService = Depends(get_ai_agent_service),
):
    message = _require_message(body.message)
    response = await service.process_message(
        agent_name, message, body.context, body.conversationHistory
    )
    return success(response.to_wire())


@router.post("/select")
async def select_agent(body: SelectAgentRequest):
    message = _require_message(body.message)
    selected = select_best_agent(message, body.context)
    return success(
        {
            "selectedAgent": selected,
            "message": f"Agente '{selected}' selecionado para processar a mensagem",
        }
    )


@router.post("/chat")
async def chat(body: AgentMessageRequest, service: AIAgentService = Depends(get_ai_agent_service)):
    message = _require_message(body.message)
    selected = select_best_agent(message, body.context)
    response = await service.process_message(
        selected, message, body.context, body.conversationHistory
    )
    return success({**response.to_wire(), "selectedAgent": selected})


@router.post("/test")
async def test_agents(
    body: AgentTestRequest, service: AIAgentService = Depends(get_ai_agent_service)
):
    """Run a batch of messages through selection and generation; failures are reported per message."""
    if body.messages is None:
        raise ValidationError("Array de mensagens é obrigatório")

    results = []
    for text in body.messages:
        try:
            selected = select_best_agent(text)
            response = await service.process_message(selected, text)
            results.append(
                {
                    "message": text,
                    "selectedAgent": selected,
                    "response": response.message,
                    "confidence": response.confidence,
                    "success": True,
                }
            )
        except Exception as e:
            logger.warning(f"Agent test failed for message {text!r}: {e}")
            results.append({"message": text, "error": str(e), "success": False})

    successful = sum(1 for r in results if r["success"])
    return success(
        {
            "results": results,
            "total": len(results),
            "successful": successful,
            "failed": len(results) - successful,
        }
    )

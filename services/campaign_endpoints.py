"""Campaign endpoints. Nothing is stored: writes echo the request back."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services import mock_data
from services.errors import ValidationError, utc_timestamp
from services.responses import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


class CreateCampaignRequest(BaseModel):
    name: Optional[str] = None
    platform: Optional[str] = None
    budget: Optional[float] = None
    targetAudience: Optional[Dict[str, Any]] = None
    schedule: Optional[Dict[str, Any]] = None


class CampaignStatusRequest(BaseModel):
    status: Optional[str] = None


@router.get("")
async def list_campaigns():
    return success(mock_data.campaign_summary())


@router.get("/{campaign_id}")
async def get_campaign(campaign_id: str):
    return success(mock_data.campaign_detail(campaign_id))


@router.post("", status_code=201)
async def create_campaign(body: CreateCampaignRequest):
    if not body.name or not body.platform or not body.budget:
        raise ValidationError("Nome, plataforma e orçamento são obrigatórios")

    campaign = mock_data.new_campaign(
        body.name, body.platform, body.budget, body.targetAudience, body.schedule
    )
    logger.info(f"Campaign created: {campaign['id']} ({body.platform})")
    return JSONResponse(
        status_code=201,
        content=success(campaign, message="Campanha criada com sucesso"),
    )


@router.put("/{campaign_id}")
async def update_campaign(campaign_id: str, updates: Dict[str, Any]):
    campaign = {**updates, "id": campaign_id, "updatedAt": utc_timestamp()}
    return success(campaign, message="Campanha atualizada com sucesso")


@router.patch("/{campaign_id}/status")
async def update_campaign_status(campaign_id: str, body: CampaignStatusRequest):
    if body.status not in mock_data.CAMPAIGN_STATUSES:
        raise ValidationError("Status inválido. Use: active, paused, completed")

    verb = mock_data.CAMPAIGN_STATUS_VERBS[body.status]
    return success(
        {"id": campaign_id, "status": body.status, "updatedAt": utc_timestamp()},
        message=f"Campanha {verb} com sucesso",
    )


@router.delete("/{campaign_id}")
async def delete_campaign(campaign_id: str):
    logger.info(f"Campaign deleted: {campaign_id}")
    return success(message="Campanha deletada com sucesso")


@router.get("/{campaign_id}/metrics")
async def get_campaign_metrics(campaign_id: str, period: str = Query("7d")):
    return success(mock_data.campaign_metrics(campaign_id, period))

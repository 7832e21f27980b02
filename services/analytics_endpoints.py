"""Analytics endpoints (demo figures; ``period`` is echoed back)."""

from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from services import mock_data
from services.errors import ValidationError
from services.responses import success

router = APIRouter(prefix="/analytics", tags=["analytics"])


class ReportRequest(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    platforms: Optional[List[str]] = None
    campaigns: Optional[List[str]] = None
    metrics: Optional[List[str]] = None


@router.get("/dashboard")
async def dashboard(period: str = Query("30d")):
    return success(mock_data.dashboard_analytics(period))


@router.get("/platform/{platform}")
async def platform_analytics(platform: str, period: str = Query("30d")):
    return success(mock_data.platform_analytics(platform, period))


@router.get("/conversions")
async def conversions(period: str = Query("30d")):
    return success(mock_data.conversions_report(period))


@router.get("/ai-agents")
async def ai_agents(period: str = Query("30d")):
    return success(mock_data.ai_agent_analytics(period))


@router.post("/report")
async def custom_report(body: ReportRequest):
    if not body.startDate or not body.endDate:
        raise ValidationError("Data de início e fim são obrigatórias")

    report = mock_data.custom_report(
        body.startDate, body.endDate, body.platforms, body.campaigns, body.metrics
    )
    return success(report, message="Relatório personalizado gerado com sucesso")

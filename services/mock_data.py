"""
Demo payloads for the dashboard endpoints.

Campaigns, analytics, users and agent stats are not persisted anywhere; these
builders return fresh literal dicts on every call so handlers can merge
request data into them without leaking state between requests.
"""

import random
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from services.errors import utc_timestamp

DEMO_USER_ID = "1"
DEMO_USER_NAME = "Usuário Demo"
DEMO_USER_EMAIL = "demo@exemplo.com"

DEFAULT_PREFERENCES = {"language": "pt-BR", "notifications": True, "theme": "light"}

CAMPAIGN_STATUSES = ("active", "paused", "completed")
CAMPAIGN_STATUS_VERBS = {"active": "ativada", "paused": "pausada", "completed": "finalizada"}


def new_id() -> str:
    """Millisecond timestamp id for freshly "created" records."""
    return str(int(time.time() * 1000))


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------

def demo_user(email: str = DEMO_USER_EMAIL, first_time: bool = False) -> Dict[str, Any]:
    return {
        "id": DEMO_USER_ID,
        "name": DEMO_USER_NAME,
        "email": email,
        "isFirstTime": first_time,
        "isAuthenticated": True,
    }


def user_profile() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "id": DEMO_USER_ID,
        "name": DEMO_USER_NAME,
        "email": DEMO_USER_EMAIL,
        "avatar": None,
        "preferences": dict(DEFAULT_PREFERENCES),
        "subscription": {
            "plan": "premium",
            "status": "active",
            "expiresAt": (now + timedelta(days=30)).isoformat(timespec="milliseconds"),
        },
        "createdAt": "2025-01-01T00:00:00.000Z",
        "lastLogin": utc_timestamp(),
    }


def updated_profile(
    name: Optional[str] = None,
    email: Optional[str] = None,
    preferences: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "id": DEMO_USER_ID,
        "name": name or DEMO_USER_NAME,
        "email": email or DEMO_USER_EMAIL,
        "preferences": preferences or dict(DEFAULT_PREFERENCES),
        "updatedAt": utc_timestamp(),
    }


def user_stats() -> Dict[str, Any]:
    return {
        "campaigns": {"total": 15, "active": 8, "completed": 7, "thisMonth": 5},
        "messages": {"sent": 2847, "received": 1923, "thisWeek": 156, "responseRate": 0.87},
        "platforms": {
            "whatsapp": {"connected": True, "messages": 1245, "contacts": 89},
            "facebook": {"connected": True, "messages": 892, "followers": 1567},
            "instagram": {"connected": True, "messages": 710, "followers": 2341},
        },
        "aiAgents": {
            "vendedor": {"messagesProcessed": 1023, "averageResponseTime": 1.2, "successRate": 0.94},
            "suporte": {"messagesProcessed": 756, "averageResponseTime": 0.8, "successRate": 0.96},
            "promoter": {"messagesProcessed": 1068, "averageResponseTime": 1.5, "successRate": 0.91},
        },
    }


# ------------------------------------------------------------------
# Campaigns
# ------------------------------------------------------------------

def campaigns() -> List[Dict[str, Any]]:
    return [
        {
            "id": "1",
            "name": "Campanha de Verão 2025",
            "platform": "Instagram",
            "status": "active",
            "budget": 5000,
            "spent": 3200,
            "impressions": 45000,
            "clicks": 1200,
            "conversions": 85,
            "ctr": 2.67,
            "conversionRate": 7.08,
            "createdAt": "2025-07-25T10:00:00Z",
            "updatedAt": "2025-07-30T15:30:00Z",
        },
        {
            "id": "2",
            "name": "Geração de Leads WhatsApp",
            "platform": "WhatsApp",
            "status": "active",
            "budget": 2000,
            "spent": 800,
            "impressions": 12000,
            "clicks": 450,
            "conversions": 32,
            "ctr": 3.75,
            "conversionRate": 7.11,
            "createdAt": "2025-07-28T09:00:00Z",
            "updatedAt": "2025-07-30T14:20:00Z",
        },
        {
            "id": "3",
            "name": "Awareness Facebook",
            "platform": "Facebook",
            "status": "paused",
            "budget": 3000,
            "spent": 2100,
            "impressions": 28000,
            "clicks": 890,
            "conversions": 45,
            "ctr": 3.18,
            "conversionRate": 5.06,
            "createdAt": "2025-07-20T14:00:00Z",
            "updatedAt": "2025-07-29T11:45:00Z",
        },
    ]


def campaign_summary() -> Dict[str, Any]:
    items = campaigns()
    return {
        "campaigns": items,
        "total": len(items),
        "active": sum(1 for c in items if c["status"] == "active"),
        "paused": sum(1 for c in items if c["status"] == "paused"),
    }


def campaign_detail(campaign_id: str) -> Dict[str, Any]:
    return {
        "id": campaign_id,
        "name": "Campanha de Verão 2025",
        "platform": "Instagram",
        "status": "active",
        "budget": 5000,
        "spent": 3200,
        "impressions": 45000,
        "clicks": 1200,
        "conversions": 85,
        "ctr": 2.67,
        "conversionRate": 7.08,
        "targetAudience": {
            "ageRange": "25-45",
            "gender": "all",
            "location": "Brasil",
            "interests": ["marketing", "tecnologia", "empreendedorismo"],
        },
        "creatives": [
            {
                "id": "1",
                "type": "image",
                "url": "https://example.com/creative1.jpg",
                "performance": {"impressions": 25000, "clicks": 700, "ctr": 2.8},
            }
        ],
        "schedule": {
            "startDate": "2025-07-25",
            "endDate": "2025-08-25",
            "timezone": "America/Sao_Paulo",
        },
        "createdAt": "2025-07-25T10:00:00Z",
        "updatedAt": "2025-07-30T15:30:00Z",
    }


def new_campaign(
    name: str,
    platform: str,
    budget: float,
    target_audience: Optional[Dict[str, Any]] = None,
    schedule: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    now = utc_timestamp()
    return {
        "id": new_id(),
        "name": name,
        "platform": platform,
        "status": "draft",
        "budget": budget,
        "spent": 0,
        "impressions": 0,
        "clicks": 0,
        "conversions": 0,
        "ctr": 0,
        "conversionRate": 0,
        "targetAudience": target_audience or {},
        "schedule": schedule or {},
        "createdAt": now,
        "updatedAt": now,
    }


_DAILY_CAMPAIGN_SERIES = [
    ("2025-07-24", 5200, 156, 12, 320),
    ("2025-07-25", 6800, 204, 18, 425),
    ("2025-07-26", 7100, 213, 15, 445),
    ("2025-07-27", 6500, 195, 14, 410),
    ("2025-07-28", 7800, 234, 16, 490),
    ("2025-07-29", 6200, 186, 10, 390),
    ("2025-07-30", 5400, 162, 8, 340),
]


def _daily(series) -> List[Dict[str, Any]]:
    return [
        {"date": day, "impressions": imp, "clicks": clicks, "conversions": conv, "spent": spent}
        for day, imp, clicks, conv, spent in series
    ]


def campaign_metrics(campaign_id: str, period: str) -> Dict[str, Any]:
    return {
        "campaignId": campaign_id,
        "period": period,
        "data": _daily(_DAILY_CAMPAIGN_SERIES),
        "summary": {
            "totalImpressions": 45000,
            "totalClicks": 1350,
            "totalConversions": 93,
            "totalSpent": 2820,
            "averageCtr": 3.0,
            "averageConversionRate": 6.89,
            "costPerClick": 2.09,
            "costPerConversion": 30.32,
        },
    }


# ------------------------------------------------------------------
# Analytics
# ------------------------------------------------------------------

_DAILY_DASHBOARD_SERIES = [
    ("2025-07-24", 4200, 126, 12, 420),
    ("2025-07-25", 5100, 153, 15, 510),
    ("2025-07-26", 4800, 144, 11, 480),
    ("2025-07-27", 5500, 165, 18, 550),
    ("2025-07-28", 6200, 186, 22, 620),
    ("2025-07-29", 5800, 174, 16, 580),
    ("2025-07-30", 4900, 147, 14, 490),
]


def dashboard_analytics(period: str) -> Dict[str, Any]:
    return {
        "period": period,
        "overview": {
            "totalCampaigns": 15,
            "activeCampaigns": 8,
            "totalSpent": 12500,
            "totalImpressions": 125000,
            "totalClicks": 3750,
            "totalConversions": 285,
            "averageCtr": 3.0,
            "averageConversionRate": 7.6,
            "costPerClick": 3.33,
            "costPerConversion": 43.86,
        },
        "platforms": {
            "whatsapp": {"campaigns": 5, "spent": 3200, "impressions": 25000, "clicks": 950,
                         "conversions": 89, "ctr": 3.8, "conversionRate": 9.37},
            "instagram": {"campaigns": 6, "spent": 5800, "impressions": 68000, "clicks": 1850,
                          "conversions": 142, "ctr": 2.72, "conversionRate": 7.68},
            "facebook": {"campaigns": 4, "spent": 3500, "impressions": 32000, "clicks": 950,
                         "conversions": 54, "ctr": 2.97, "conversionRate": 5.68},
        },
        "trends": {"daily": _daily(_DAILY_DASHBOARD_SERIES)},
        "topCampaigns": [
            {"id": "1", "name": "Campanha de Verão 2025", "platform": "Instagram",
             "impressions": 45000, "clicks": 1200, "conversions": 85, "spent": 3200, "roi": 2.65},
            {"id": "2", "name": "Geração de Leads WhatsApp", "platform": "WhatsApp",
             "impressions": 12000, "clicks": 450, "conversions": 32, "spent": 800, "roi": 4.0},
        ],
    }


def platform_analytics(platform: str, period: str) -> Dict[str, Any]:
    return {
        "platform": platform,
        "period": period,
        "summary": {
            "campaigns": 6,
            "spent": 5800,
            "impressions": 68000,
            "clicks": 1850,
            "conversions": 142,
            "ctr": 2.72,
            "conversionRate": 7.68,
            "costPerClick": 3.14,
            "costPerConversion": 40.85,
        },
        "demographics": {
            "age": [
                {"range": "18-24", "percentage": 15},
                {"range": "25-34", "percentage": 35},
                {"range": "35-44", "percentage": 28},
                {"range": "45-54", "percentage": 15},
                {"range": "55+", "percentage": 7},
            ],
            "gender": [
                {"type": "Feminino", "percentage": 58},
                {"type": "Masculino", "percentage": 42},
            ],
            "location": [
                {"city": "São Paulo", "percentage": 32},
                {"city": "Rio de Janeiro", "percentage": 18},
                {"city": "Belo Horizonte", "percentage": 12},
                {"city": "Brasília", "percentage": 10},
                {"city": "Outros", "percentage": 28},
            ],
        },
        "bestPerformingContent": [
            {"id": "1", "type": "image", "description": "Post promocional verão",
             "impressions": 15000, "clicks": 450, "ctr": 3.0},
            {"id": "2", "type": "video", "description": "Vídeo tutorial produto",
             "impressions": 12000, "clicks": 480, "ctr": 4.0},
        ],
    }


def conversions_report(period: str) -> Dict[str, Any]:
    return {
        "period": period,
        "summary": {
            "totalConversions": 285,
            "conversionRate": 7.6,
            "costPerConversion": 43.86,
            "revenue": 28500,
            "roi": 2.28,
        },
        "byPlatform": [
            {"platform": "WhatsApp", "conversions": 89, "conversionRate": 9.37,
             "costPerConversion": 35.96, "revenue": 8900},
            {"platform": "Instagram", "conversions": 142, "conversionRate": 7.68,
             "costPerConversion": 40.85, "revenue": 14200},
            {"platform": "Facebook", "conversions": 54, "conversionRate": 5.68,
             "costPerConversion": 64.81, "revenue": 5400},
        ],
        "conversionFunnel": [
            {"stage": "Impressões", "count": 125000, "percentage": 100},
            {"stage": "Cliques", "count": 3750, "percentage": 3.0},
            {"stage": "Visitas à Landing Page", "count": 3200, "percentage": 85.3},
            {"stage": "Leads Gerados", "count": 450, "percentage": 14.1},
            {"stage": "Conversões", "count": 285, "percentage": 63.3},
        ],
        "topConvertingCampaigns": [
            {"id": "2", "name": "Geração de Leads WhatsApp", "conversions": 32,
             "conversionRate": 7.11, "revenue": 3200},
            {"id": "1", "name": "Campanha de Verão 2025", "conversions": 85,
             "conversionRate": 7.08, "revenue": 8500},
        ],
    }


def ai_agent_analytics(period: str) -> Dict[str, Any]:
    return {
        "period": period,
        "summary": {
            "totalMessages": 2847,
            "averageResponseTime": 1.2,
            "averageConfidence": 0.89,
            "successRate": 0.94,
        },
        "byAgent": [
            {"name": "vendedor", "messagesProcessed": 1023, "averageResponseTime": 1.2,
             "averageConfidence": 0.91, "successRate": 0.94, "conversionsGenerated": 89},
            {"name": "suporte", "messagesProcessed": 756, "averageResponseTime": 0.8,
             "averageConfidence": 0.95, "successRate": 0.96, "issuesResolved": 720},
            {"name": "promoter", "messagesProcessed": 1068, "averageResponseTime": 1.5,
             "averageConfidence": 0.87, "successRate": 0.91, "contentCreated": 156},
        ],
        "messageTypes": [
            {"type": "Vendas", "count": 1023, "percentage": 35.9},
            {"type": "Suporte", "count": 756, "percentage": 26.6},
            {"type": "Marketing", "count": 1068, "percentage": 37.5},
        ],
        "platformDistribution": [
            {"platform": "WhatsApp", "messages": 1245, "percentage": 43.7},
            {"platform": "Instagram", "messages": 892, "percentage": 31.3},
            {"platform": "Facebook", "messages": 710, "percentage": 25.0},
        ],
    }


def custom_report(
    start_date: str,
    end_date: str,
    platforms: Optional[List[str]] = None,
    campaign_ids: Optional[List[str]] = None,
    metrics: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "reportId": new_id(),
        "period": {"startDate": start_date, "endDate": end_date},
        "filters": {
            "platforms": platforms or [],
            "campaigns": campaign_ids or [],
            "metrics": metrics or [],
        },
        "data": {
            "summary": {
                "totalImpressions": 85000,
                "totalClicks": 2550,
                "totalConversions": 195,
                "totalSpent": 8500,
                "averageCtr": 3.0,
                "averageConversionRate": 7.6,
            },
            "detailed": [
                {"date": start_date, "impressions": 12000, "clicks": 360,
                 "conversions": 27, "spent": 1200},
            ],
        },
        "generatedAt": utc_timestamp(),
    }


# ------------------------------------------------------------------
# AI agents
# ------------------------------------------------------------------

def agent_stats(agent_names: List[str], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Randomized activity numbers per agent."""
    rng = rng or random.Random()
    return {
        "totalAgents": len(agent_names),
        "agents": [
            {
                "name": name,
                "status": "active",
                "messagesProcessed": rng.randint(0, 999),
                "averageResponseTime": rng.randint(500, 2499),
                "successRate": round(rng.uniform(0.8, 1.0), 2),
            }
            for name in agent_names
        ],
        "totalMessagesProcessed": rng.randint(0, 4999),
        "averageConfidence": round(rng.uniform(0.7, 1.0), 2),
    }

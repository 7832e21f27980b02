"""Tests for the campaign, analytics, user and auth routes."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from services.auth import create_jwt_token
from services.marketing_api import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


# ------------------------------------------------------------------
# Campaigns
# ------------------------------------------------------------------

def test_list_campaigns_counts(client):
    data = client.get("/api/campaigns").json()["data"]

    assert data["total"] == 3
    assert data["active"] == 2
    assert data["paused"] == 1
    assert len(data["campaigns"]) == 3


def test_get_campaign_echoes_id(client):
    data = client.get("/api/campaigns/abc").json()["data"]
    assert data["id"] == "abc"
    assert data["targetAudience"]["location"] == "Brasil"


def test_create_campaign(client):
    response = client.post(
        "/api/campaigns",
        json={"name": "Black Friday", "platform": "Instagram", "budget": 1500},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["message"] == "Campanha criada com sucesso"
    campaign = payload["data"]
    assert campaign["status"] == "draft"
    assert campaign["budget"] == 1500
    assert campaign["spent"] == 0
    assert campaign["id"].isdigit()


def test_create_campaign_requires_fields(client):
    response = client.post("/api/campaigns", json={"name": "Sem plataforma"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Nome, plataforma e orçamento são obrigatórios"


def test_update_campaign_merges_body(client):
    data = client.put("/api/campaigns/7", json={"name": "Novo nome"}).json()["data"]

    assert data["id"] == "7"
    assert data["name"] == "Novo nome"
    assert "updatedAt" in data


@pytest.mark.parametrize(
    "status,verb", [("active", "ativada"), ("paused", "pausada"), ("completed", "finalizada")]
)
def test_campaign_status_change(client, status, verb):
    payload = client.patch("/api/campaigns/1/status", json={"status": status}).json()

    assert payload["data"]["status"] == status
    assert payload["message"] == f"Campanha {verb} com sucesso"


def test_campaign_status_rejects_unknown(client):
    response = client.patch("/api/campaigns/1/status", json={"status": "archived"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Status inválido. Use: active, paused, completed"


def test_delete_campaign(client):
    payload = client.delete("/api/campaigns/1").json()
    assert payload["success"] is True
    assert payload["message"] == "Campanha deletada com sucesso"


def test_campaign_metrics_default_period(client):
    data = client.get("/api/campaigns/9/metrics").json()["data"]

    assert data["campaignId"] == "9"
    assert data["period"] == "7d"
    assert len(data["data"]) == 7


# ------------------------------------------------------------------
# Analytics
# ------------------------------------------------------------------

@pytest.mark.parametrize("path", ["dashboard", "conversions", "ai-agents", "platform/instagram"])
def test_analytics_period_defaults_and_echo(client, path):
    assert client.get(f"/api/analytics/{path}").json()["data"]["period"] == "30d"
    assert client.get(f"/api/analytics/{path}?period=7d").json()["data"]["period"] == "7d"


def test_custom_report(client):
    response = client.post(
        "/api/analytics/report",
        json={"startDate": "2025-07-01", "endDate": "2025-07-31", "platforms": ["whatsapp"]},
    )

    data = response.json()["data"]
    assert data["period"] == {"startDate": "2025-07-01", "endDate": "2025-07-31"}
    assert data["filters"]["platforms"] == ["whatsapp"]
    assert data["data"]["detailed"][0]["date"] == "2025-07-01"


def test_custom_report_requires_dates(client):
    response = client.post("/api/analytics/report", json={"startDate": "2025-07-01"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Data de início e fim são obrigatórias"


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------

def test_profile_update_falls_back_to_demo_values(client):
    data = client.put("/api/users/profile", json={"name": "Ana"}).json()["data"]

    assert data["name"] == "Ana"
    assert data["email"] == "demo@exemplo.com"
    assert data["preferences"]["language"] == "pt-BR"


def test_user_stats(client):
    data = client.get("/api/users/stats").json()["data"]
    assert set(data["aiAgents"]) == {"vendedor", "suporte", "promoter"}


# ------------------------------------------------------------------
# Auth
# ------------------------------------------------------------------

def test_login_then_verify(client):
    login = client.post("/api/auth/login", json={"email": "ana@exemplo.com", "password": "x"})
    token = login.json()["data"]["token"]

    response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["valid"] is True
    assert data["user"]["email"] == "ana@exemplo.com"


def test_login_requires_credentials(client):
    response = client.post("/api/auth/login", json={"email": "ana@exemplo.com"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email e senha são obrigatórios"


def test_register_returns_201_with_token(client):
    response = client.post(
        "/api/auth/register", json={"name": "Ana", "email": "ana@exemplo.com", "password": "x"}
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["isFirstTime"] is True
    assert data["token"].count(".") == 2


def test_verify_without_token_is_401(client):
    response = client.get("/api/auth/verify")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_verify_with_garbage_token(client):
    response = client.get("/api/auth/verify", headers={"Authorization": "Bearer nope"})
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


def test_verify_with_expired_token(client):
    token = create_jwt_token("1", "ana@exemplo.com", expires_in=timedelta(seconds=-5))
    response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


def test_logout(client):
    assert client.post("/api/auth/logout").json()["message"] == "Logout realizado com sucesso"

"""Tests for /api/webhook routes."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from services.config import Settings, get_settings
from services.marketing_api import create_app
from services.meta_service import MetaService, get_meta_service
from services.whatsapp_service import get_whatsapp_service


@pytest.fixture
def whatsapp():
    service = MagicMock()
    service.validate_webhook.side_effect = lambda body, signature=None: isinstance(body, dict)
    service.process_incoming_message = AsyncMock()
    service.send_message = AsyncMock(return_value=True)
    service.get_instance_status = AsyncMock(
        return_value={"connected": True, "phone": "5511", "status": "connected"}
    )
    return service


@pytest.fixture
def meta():
    service = MagicMock()
    service.verify_webhook.side_effect = MetaService(
        settings=Settings(meta_verify_token="verify-me")
    ).verify_webhook
    service.process_facebook_webhook = AsyncMock()
    service.process_instagram_webhook = AsyncMock()
    service.send_facebook_message = AsyncMock(return_value=False)
    service.send_instagram_message = AsyncMock(return_value=True)
    return service


@pytest.fixture
def client(whatsapp, meta):
    app = create_app()
    app.dependency_overrides[get_whatsapp_service] = lambda: whatsapp
    app.dependency_overrides[get_meta_service] = lambda: meta
    return TestClient(app)


def test_whatsapp_webhook_acknowledges_and_processes_in_background(client, whatsapp):
    payload = {"phone": "5511", "text": {"message": "Oi"}}
    response = client.post("/api/webhook/whatsapp", json=payload)

    assert response.status_code == 200
    assert response.json()["message"] == "Webhook recebido"
    whatsapp.process_incoming_message.assert_awaited_once_with(payload)


def test_whatsapp_webhook_rejects_invalid_body(client, whatsapp):
    response = client.post("/api/webhook/whatsapp", json=["nope"])

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Webhook inválido"
    whatsapp.process_incoming_message.assert_not_awaited()


def test_whatsapp_webhook_rejects_malformed_json(client):
    response = client.post(
        "/api/webhook/whatsapp", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


def test_meta_verification_handshake(client):
    response = client.get(
        "/api/webhook/meta",
        params={"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "c-42"},
    )

    assert response.status_code == 200
    assert response.text == "c-42"
    assert response.headers["content-type"].startswith("text/plain")


def test_meta_verification_rejects_bad_token(client):
    response = client.get(
        "/api/webhook/meta",
        params={"hub.mode": "subscribe", "hub.verify_token": "wrong", "hub.challenge": "c-42"},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.parametrize(
    "obj,facebook_calls,instagram_calls",
    [("page", 1, 0), ("instagram", 0, 1), ("whatsapp_business_account", 0, 0)],
)
def test_meta_webhook_dispatch(client, meta, obj, facebook_calls, instagram_calls):
    response = client.post("/api/webhook/meta", json={"object": obj, "entry": []})

    assert response.status_code == 200
    assert response.json()["message"] == "Webhook processado"
    assert meta.process_facebook_webhook.await_count == facebook_calls
    assert meta.process_instagram_webhook.await_count == instagram_calls


def test_email_webhook_accepts_batches(client):
    response = client.post(
        "/api/webhook/email",
        json=[{"event": "delivered", "email": "a@b.c"}, {"event": "bounce", "email": "d@e.f"}],
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"processed": 2}


def test_email_webhook_accepts_single_event(client):
    response = client.post("/api/webhook/email", json={"event": "open", "email": "a@b.c"})
    assert response.json()["data"] == {"processed": 1}


def test_channel_test_sends_via_whatsapp(client, whatsapp):
    message = "Mensagem de teste com mais de cinquenta caracteres para o preview!"
    response = client.post(
        "/api/webhook/test",
        json={"platform": "WhatsApp", "message": message, "recipient": "5511"},
    )

    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Mensagem enviada com sucesso"
    assert payload["data"]["messagePreview"] == message[:50] + "..."
    whatsapp.send_message.assert_awaited_once_with("5511", message)


def test_channel_test_reports_send_failure(client):
    response = client.post(
        "/api/webhook/test",
        json={"platform": "facebook", "message": "curta", "recipient": "user-1"},
    )

    payload = response.json()
    assert response.status_code == 200
    assert payload["success"] is False
    assert payload["message"] == "Falha ao enviar mensagem"
    assert payload["data"]["messagePreview"] == "curta"


@pytest.mark.parametrize(
    "body,message",
    [
        ({"message": "oi"}, "Platform e message são obrigatórios"),
        ({"platform": "telegram", "message": "oi", "recipient": "1"},
         "Platform não suportada. Use: whatsapp, facebook, instagram"),
        ({"platform": "instagram", "message": "oi"}, "Recipient é obrigatório para Instagram"),
    ],
)
def test_channel_test_validation(client, body, message):
    response = client.post("/api/webhook/test", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == message


def test_channel_status(client, monkeypatch):
    monkeypatch.setenv("META_ACCESS_TOKEN", "token")
    monkeypatch.delenv("INSTAGRAM_BUSINESS_ID", raising=False)
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    get_settings.cache_clear()

    data = client.get("/api/webhook/status").json()["data"]

    assert data["whatsapp"]["status"] == "connected"
    assert data["facebook"] == {"connected": True, "status": "active"}
    assert data["instagram"]["status"] == "not_configured"
    assert data["email"]["status"] == "not_configured"


# ------------------------------------------------------------------
# Reply ordering (raw ASGI, since TestClient waits for background tasks)
# ------------------------------------------------------------------

class SlowChannel:
    """Background processor that only finishes once the HTTP reply has gone out."""

    def __init__(self):
        self.reply_sent = asyncio.Event()
        self.events = []

    async def send(self, message):
        if message["type"] == "http.response.start":
            self.events.append(("status", message["status"]))
        elif message["type"] == "http.response.body" and not message.get("more_body", False):
            self.events.append("reply")
            self.reply_sent.set()

    async def process(self, payload):
        try:
            await asyncio.wait_for(self.reply_sent.wait(), timeout=2)
        except asyncio.TimeoutError:
            self.events.append("processed before reply")
            return
        self.events.append("processed")


async def _post_asgi(app, path, payload, send):
    body = json.dumps(payload).encode()
    body_read = False

    async def receive():
        nonlocal body_read
        if not body_read:
            body_read = True
            return {"type": "http.request", "body": body, "more_body": False}
        await asyncio.Event().wait()

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [
            (b"host", b"testserver"),
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
        ],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }
    await asyncio.wait_for(app(scope, receive, send), timeout=5)


@pytest.mark.asyncio
async def test_whatsapp_webhook_replies_before_processing_completes():
    channel = SlowChannel()
    whatsapp = MagicMock()
    whatsapp.validate_webhook.return_value = True
    whatsapp.process_incoming_message = channel.process

    app = create_app()
    app.dependency_overrides[get_whatsapp_service] = lambda: whatsapp

    await _post_asgi(app, "/api/webhook/whatsapp", {"phone": "5511", "body": "oi"}, channel.send)

    assert channel.events == [("status", 200), "reply", "processed"]


@pytest.mark.asyncio
async def test_meta_webhook_replies_before_processing_completes():
    channel = SlowChannel()
    meta = MagicMock()
    meta.process_facebook_webhook = channel.process

    app = create_app()
    app.dependency_overrides[get_meta_service] = lambda: meta

    await _post_asgi(app, "/api/webhook/meta", {"object": "page", "entry": []}, channel.send)

    assert channel.events == [("status", 200), "reply", "processed"]

"""
Inbound webhooks (WhatsApp, Meta, SendGrid) plus channel test/status routes.

Messaging webhooks acknowledge immediately and hand processing to FastAPI
``BackgroundTasks``, which run after the response has been sent. The sender
never observes downstream failures.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from services.config import get_settings
from services.email_events import process_email_events
from services.errors import ForbiddenError, ValidationError
from services.logging_setup import log_webhook_activity
from services.meta_service import MetaService, get_meta_service
from services.responses import success
from services.whatsapp_service import WhatsAppService, get_whatsapp_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])

PREVIEW_CHARS = 50


class ChannelTestRequest(BaseModel):
    platform: Optional[str] = None
    message: Optional[str] = None
    recipient: Optional[str] = None


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationError("Corpo JSON inválido") from e


# ------------------------------------------------------------------
# WhatsApp
# ------------------------------------------------------------------

@router.post("/whatsapp")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    whatsapp: WhatsAppService = Depends(get_whatsapp_service),
):
    payload = await _json_body(request)
    if not whatsapp.validate_webhook(payload):
        raise ValidationError("Webhook inválido")

    background_tasks.add_task(whatsapp.process_incoming_message, payload)
    return success(message="Webhook recebido")


# ------------------------------------------------------------------
# Meta (Facebook / Instagram)
# ------------------------------------------------------------------

@router.get("/meta")
async def meta_verify(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    meta: MetaService = Depends(get_meta_service),
):
    result = meta.verify_webhook(mode, token, challenge)
    if result is None:
        raise ForbiddenError("Verificação do webhook falhou")
    return PlainTextResponse(result)


@router.post("/meta")
async def meta_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    meta: MetaService = Depends(get_meta_service),
):
    payload = await _json_body(request)
    log_webhook_activity("meta", "webhook_received", payload)

    target = payload.get("object") if isinstance(payload, dict) else None
    if target == "page":
        background_tasks.add_task(meta.process_facebook_webhook, payload)
    elif target == "instagram":
        background_tasks.add_task(meta.process_instagram_webhook, payload)
    else:
        logger.info(f"Ignoring Meta webhook for object {target!r}")

    return success(message="Webhook processado")


# ------------------------------------------------------------------
# Email (SendGrid)
# ------------------------------------------------------------------

@router.post("/email")
async def email_webhook(request: Request):
    payload = await _json_body(request)
    log_webhook_activity("email", "webhook_received", payload)
    handled = process_email_events(payload)
    return success({"processed": handled}, message="Webhook de email processado")


# ------------------------------------------------------------------
# Diagnostics
# ------------------------------------------------------------------

@router.post("/test")
async def channel_test(
    body: ChannelTestRequest,
    whatsapp: WhatsAppService = Depends(get_whatsapp_service),
    meta: MetaService = Depends(get_meta_service),
):
    """Send a message through one channel to check its credentials."""
    if not body.platform or not body.message:
        raise ValidationError("Platform e message são obrigatórios")

    platform = body.platform.lower()
    senders = {
        "whatsapp": ("WhatsApp", whatsapp.send_message),
        "facebook": ("Facebook", meta.send_facebook_message),
        "instagram": ("Instagram", meta.send_instagram_message),
    }
    if platform not in senders:
        raise ValidationError("Platform não suportada. Use: whatsapp, facebook, instagram")

    label, send = senders[platform]
    if not body.recipient:
        raise ValidationError(f"Recipient é obrigatório para {label}")

    sent = await send(body.recipient, body.message)

    preview = body.message[:PREVIEW_CHARS] + ("..." if len(body.message) > PREVIEW_CHARS else "")
    response = success(
        {
            "sent": sent,
            "platform": body.platform,
            "recipient": body.recipient,
            "messagePreview": preview,
        },
        message="Mensagem enviada com sucesso" if sent else "Falha ao enviar mensagem",
    )
    response["success"] = sent
    return response


@router.get("/status")
async def channel_status(whatsapp: WhatsAppService = Depends(get_whatsapp_service)):
    settings = get_settings()

    def configured(value: str) -> dict:
        return {"connected": True, "status": "active" if value else "not_configured"}

    return success(
        {
            "whatsapp": await whatsapp.get_instance_status(),
            "facebook": configured(settings.meta_access_token),
            "instagram": configured(settings.instagram_business_id),
            "email": configured(settings.sendgrid_api_key),
        }
    )

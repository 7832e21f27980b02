"""
WhatsApp channel client (Z-API REST).

Outbound calls go to ``{ZAPI_BASE_URL}/{ZAPI_INSTANCE_ID}/{endpoint}`` with the
``Client-Token`` header. Send operations never raise: transport and HTTP
failures are logged and reported as ``False`` / ``None``.

Inbound messages (webhook payloads) are routed through the agent selector,
answered by the chosen agent and the reply is sent back to the contact.
"""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import httpx

from agents.router import select_best_agent
from services.config import Settings, get_settings
from services.logging_setup import log_webhook_activity

logger = logging.getLogger(__name__)

BULK_SEND_DELAY = 1.0  # seconds between bulk messages
SUGGESTIONS_DELAY = 2.0  # seconds between a reply and its suggestions
LOG_PREVIEW_CHARS = 100


@dataclass
class WhatsAppMessage:
    id: Optional[str]
    sender: str
    to: str
    body: str
    type: str = "text"
    timestamp: int = 0
    media_url: Optional[str] = None
    caption: Optional[str] = None


@dataclass
class WhatsAppContact:
    phone: str
    name: Optional[str] = None
    profile_picture: Optional[str] = None


def format_suggestions(actions: List[str]) -> str:
    lines = "\n".join(f"{index}. {action}" for index, action in enumerate(actions, start=1))
    return f"\n💡 *Sugestões:*\n{lines}"


class WhatsAppService:
    """Async client for the Z-API WhatsApp gateway."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        agent_service: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        bulk_delay: float = BULK_SEND_DELAY,
        suggestions_delay: float = SUGGESTIONS_DELAY,
    ):
        settings = settings or get_settings()
        self.base_url = settings.zapi_base_url.rstrip("/")
        self.instance_id = settings.zapi_instance_id
        self.token = settings.zapi_token
        self.timeout = settings.http_timeout
        self._agent_service = agent_service
        self._transport = transport
        self.bulk_delay = bulk_delay
        self.suggestions_delay = suggestions_delay

    @property
    def agent_service(self):
        if self._agent_service is None:
            from agents.responder import get_ai_agent_service

            self._agent_service = get_ai_agent_service()
        return self._agent_service

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Client-Token": self.token}

    def _api_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{self.instance_id}/{endpoint}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers(), transport=self._transport
        )

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> httpx.Response:
        async with self._client() as client:
            resp = await client.post(self._api_url(endpoint), json=payload)
            resp.raise_for_status()
            return resp

    async def _get(self, endpoint: str) -> httpx.Response:
        async with self._client() as client:
            resp = await client.get(self._api_url(endpoint))
            resp.raise_for_status()
            return resp

    @staticmethod
    def _accepted(resp: httpx.Response) -> bool:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        return bool(isinstance(data, dict) and data.get("success")) or resp.status_code == 200

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send_message(self, to: str, message: str) -> bool:
        try:
            resp = await self._post("send-text", {"phone": to, "message": message})
        except Exception as e:
            logger.error(f"Failed to send WhatsApp message to {to}: {e}")
            return False

        log_webhook_activity(
            "whatsapp", "message_sent", {"to": to, "message": message[:LOG_PREVIEW_CHARS]}
        )
        return self._accepted(resp)

    async def send_image(self, to: str, image_url: str, caption: str = "") -> bool:
        try:
            resp = await self._post(
                "send-image", {"phone": to, "image": image_url, "caption": caption or ""}
            )
        except Exception as e:
            logger.error(f"Failed to send WhatsApp image to {to}: {e}")
            return False

        log_webhook_activity(
            "whatsapp", "image_sent", {"to": to, "imageUrl": image_url, "caption": caption}
        )
        return self._accepted(resp)

    async def send_document(self, to: str, document_url: str, filename: str) -> bool:
        try:
            resp = await self._post(
                "send-document",
                {"phone": to, "document": document_url, "filename": filename},
            )
        except Exception as e:
            logger.error(f"Failed to send WhatsApp document to {to}: {e}")
            return False

        log_webhook_activity(
            "whatsapp",
            "document_sent",
            {"to": to, "documentUrl": document_url, "filename": filename},
        )
        return self._accepted(resp)

    async def send_bulk_message(self, contacts: List[str], message: str) -> Dict[str, int]:
        """Send the same text to many contacts, one at a time."""
        success = 0
        failed = 0

        for contact in contacts:
            if await self.send_message(contact, message):
                success += 1
            else:
                failed += 1
            # Throttle to stay under Z-API rate limits
            await asyncio.sleep(self.bulk_delay)

        log_webhook_activity(
            "whatsapp",
            "bulk_message_sent",
            {"totalContacts": len(contacts), "success": success, "failed": failed},
        )
        return {"success": success, "failed": failed}

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    async def create_group(self, name: str, participants: List[str]) -> Optional[str]:
        try:
            resp = await self._post("create-group", {"groupName": name, "phones": participants})
            data = resp.json()
        except Exception as e:
            logger.error(f"Failed to create WhatsApp group '{name}': {e}")
            return None

        if isinstance(data, dict) and data.get("success"):
            log_webhook_activity(
                "whatsapp", "group_created", {"name": name, "participants": participants}
            )
            return data.get("groupId")
        return None

    async def send_message_to_group(self, group_id: str, message: str) -> bool:
        try:
            resp = await self._post("send-text", {"phone": group_id, "message": message})
        except Exception as e:
            logger.error(f"Failed to send message to group {group_id}: {e}")
            return False

        log_webhook_activity(
            "whatsapp",
            "group_message_sent",
            {"groupId": group_id, "message": message[:LOG_PREVIEW_CHARS]},
        )
        return self._accepted(resp)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_contact_info(self, phone: str) -> Optional[WhatsAppContact]:
        try:
            data = (await self._get(f"get-contact/{phone}")).json()
        except Exception as e:
            logger.error(f"Failed to fetch WhatsApp contact {phone}: {e}")
            return None

        contact = data.get("contact") if isinstance(data, dict) else None
        if not contact:
            return None
        return WhatsAppContact(
            phone=phone,
            name=contact.get("name") or contact.get("pushname"),
            profile_picture=contact.get("profilePicture"),
        )

    async def get_instance_status(self) -> Dict[str, Any]:
        try:
            data = (await self._get("status")).json()
            return {
                "connected": bool(data.get("connected", False)),
                "phone": data.get("phone"),
                "status": data.get("status") or "unknown",
            }
        except Exception as e:
            logger.error(f"Failed to fetch Z-API instance status: {e}")
            return {"connected": False, "phone": None, "status": "error"}

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def validate_webhook(self, body: Any, signature: Optional[str] = None) -> bool:
        """Z-API does not sign callbacks; any JSON object is accepted."""
        return isinstance(body, dict)

    def parse_message(self, payload: Dict[str, Any]) -> WhatsAppMessage:
        text = payload.get("text")
        if isinstance(text, dict):
            body = text.get("message")
        else:
            body = text if isinstance(text, str) else None
        image = payload.get("image")
        if not isinstance(image, dict):
            image = {}
        return WhatsAppMessage(
            id=payload.get("messageId") or payload.get("id"),
            sender=payload.get("phone") or payload.get("from") or "",
            to=payload.get("instanceId") or self.instance_id,
            body=body or payload.get("body") or "",
            type=payload.get("type") or "text",
            timestamp=payload.get("timestamp") or int(time.time() * 1000),
            media_url=image.get("imageUrl") or payload.get("mediaUrl"),
            caption=image.get("caption") or payload.get("caption"),
        )

    async def process_incoming_message(self, payload: Dict[str, Any]) -> None:
        """Answer an inbound WhatsApp message with the best-suited agent. Never raises."""
        try:
            log_webhook_activity("whatsapp", "message_received", payload)

            if payload.get("fromMe"):
                return

            message = self.parse_message(payload)
            contact = await self.get_contact_info(message.sender)

            context = {
                "platform": "whatsapp",
                "contact": asdict(contact) if contact else None,
                "messageType": message.type,
                "timestamp": message.timestamp,
            }

            agent_name = select_best_agent(message.body, context)
            response = await self.agent_service.process_message(agent_name, message.body, context)

            if not response.message:
                return

            await self.send_message(message.sender, response.message)

            if response.suggested_actions:
                await asyncio.sleep(self.suggestions_delay)
                await self.send_message(
                    message.sender, format_suggestions(response.suggested_actions)
                )
        except Exception as e:
            logger.error(f"Failed to process WhatsApp message: {e}", exc_info=True)


_service: Optional[WhatsAppService] = None


def get_whatsapp_service() -> WhatsAppService:
    global _service
    if _service is None:
        _service = WhatsAppService()
    return _service

"""
Meta Graph API client (Facebook Messenger, Instagram Direct, page publishing).

All calls go to ``https://graph.facebook.com/{version}/...`` with a bearer
access token. Failures are logged and reported as ``False`` / ``None``;
webhook processing never raises.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Dict, Optional

import httpx

from agents.router import select_best_agent
from services.config import Settings, get_settings
from services.logging_setup import log_webhook_activity

logger = logging.getLogger(__name__)

GRAPH_API_BASE = "https://graph.facebook.com"
MEDIA_PROCESSING_WAIT = 5.0  # seconds between media container creation and publish
METRICS_LOOKBACK_DAYS = 7
LOG_PREVIEW_CHARS = 100

FACEBOOK_PAGE_METRICS = "page_fans,page_impressions,page_engaged_users"
INSTAGRAM_METRICS = "follower_count,impressions,reach,profile_views"


@dataclass
class MetaUser:
    id: str
    platform: str
    name: Optional[str] = None
    username: Optional[str] = None
    profile_picture: Optional[str] = None


class MetaService:
    """Async client for the Meta Graph API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        agent_service: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        publish_wait: float = MEDIA_PROCESSING_WAIT,
    ):
        settings = settings or get_settings()
        self.access_token = settings.meta_access_token
        self.verify_token = settings.meta_verify_token
        self.page_id = settings.meta_page_id
        self.instagram_business_id = settings.instagram_business_id
        self.api_version = settings.meta_api_version
        self.timeout = settings.http_timeout
        self._agent_service = agent_service
        self._transport = transport
        self.publish_wait = publish_wait

    @property
    def agent_service(self):
        if self._agent_service is None:
            from agents.responder import get_ai_agent_service

            self._agent_service = get_ai_agent_service()
        return self._agent_service

    def _api_url(self, endpoint: str) -> str:
        return f"{GRAPH_API_BASE}/{self.api_version}/{endpoint}"

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}",
        }
        return httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self._transport)

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> httpx.Response:
        async with self._client() as client:
            resp = await client.post(self._api_url(endpoint), json=payload)
            resp.raise_for_status()
            return resp

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        async with self._client() as client:
            resp = await client.get(self._api_url(endpoint), params=params)
            resp.raise_for_status()
            return resp.json()

    # ------------------------------------------------------------------
    # Webhook verification
    # ------------------------------------------------------------------

    def verify_webhook(
        self, mode: Optional[str], token: Optional[str], challenge: Optional[str]
    ) -> Optional[str]:
        """Meta subscription handshake: echo the challenge when the token matches."""
        if mode == "subscribe" and self.verify_token and token == self.verify_token:
            logger.info("Meta webhook verified")
            return challenge
        logger.warning("Meta webhook verification failed")
        return None

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def send_facebook_message(self, recipient_id: str, message: str) -> bool:
        payload = {
            "recipient": {"id": recipient_id},
            "message": {"text": message},
            "messaging_type": "RESPONSE",
        }
        try:
            resp = await self._post(f"{self.page_id}/messages", payload)
        except Exception as e:
            logger.error(f"Failed to send Facebook message to {recipient_id}: {e}")
            return False

        log_webhook_activity(
            "facebook",
            "message_sent",
            {"recipientId": recipient_id, "message": message[:LOG_PREVIEW_CHARS]},
        )
        return resp.status_code == 200

    async def send_instagram_message(self, recipient_id: str, message: str) -> bool:
        payload = {"recipient": {"id": recipient_id}, "message": {"text": message}}
        try:
            resp = await self._post(f"{self.instagram_business_id}/messages", payload)
        except Exception as e:
            logger.error(f"Failed to send Instagram message to {recipient_id}: {e}")
            return False

        log_webhook_activity(
            "instagram",
            "message_sent",
            {"recipientId": recipient_id, "message": message[:LOG_PREVIEW_CHARS]},
        )
        return resp.status_code == 200

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_facebook_user_info(self, user_id: str) -> Optional[MetaUser]:
        try:
            data = await self._get(user_id, {"fields": "name,profile_pic"})
        except Exception as e:
            logger.error(f"Failed to fetch Facebook user {user_id}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        return MetaUser(
            id=user_id,
            platform="facebook",
            name=data.get("name"),
            profile_picture=data.get("profile_pic"),
        )

    async def get_instagram_user_info(self, user_id: str) -> Optional[MetaUser]:
        try:
            data = await self._get(user_id, {"fields": "name,username,profile_picture_url"})
        except Exception as e:
            logger.error(f"Failed to fetch Instagram user {user_id}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        return MetaUser(
            id=user_id,
            platform="instagram",
            name=data.get("name"),
            username=data.get("username"),
            profile_picture=data.get("profile_picture_url"),
        )

    # ------------------------------------------------------------------
    # Webhook processing
    # ------------------------------------------------------------------

    async def process_facebook_webhook(self, payload: Dict[str, Any]) -> None:
        try:
            log_webhook_activity("facebook", "webhook_received", payload)
            if payload.get("object") != "page":
                return
            for entry in payload.get("entry") or []:
                for event in entry.get("messaging") or []:
                    await self._answer_event("facebook", event)
        except Exception as e:
            logger.error(f"Failed to process Facebook webhook: {e}", exc_info=True)

    async def process_instagram_webhook(self, payload: Dict[str, Any]) -> None:
        try:
            log_webhook_activity("instagram", "webhook_received", payload)
            if payload.get("object") != "instagram":
                return
            for entry in payload.get("entry") or []:
                for event in entry.get("messaging") or []:
                    await self._answer_event("instagram", event)
        except Exception as e:
            logger.error(f"Failed to process Instagram webhook: {e}", exc_info=True)

    async def _answer_event(self, platform: str, event: Dict[str, Any]) -> None:
        """Reply to one messaging event. Failures are confined to the event."""
        try:
            message = event.get("message") or {}
            # Facebook echoes the page's own messages back
            if platform == "facebook" and message.get("is_echo"):
                return

            text = message.get("text") or ""
            if not text:
                return

            sender_id = event["sender"]["id"]
            if platform == "facebook":
                user = await self.get_facebook_user_info(sender_id)
            else:
                user = await self.get_instagram_user_info(sender_id)

            context = {
                "platform": platform,
                "user": asdict(user) if user else None,
                "timestamp": event.get("timestamp"),
            }

            agent_name = select_best_agent(text, context)
            response = await self.agent_service.process_message(agent_name, text, context)

            if response.message:
                if platform == "facebook":
                    await self.send_facebook_message(sender_id, response.message)
                else:
                    await self.send_instagram_message(sender_id, response.message)
        except Exception as e:
            logger.error(f"Failed to process {platform} message: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def publish_facebook_post(
        self, message: str, image_url: Optional[str] = None
    ) -> Optional[str]:
        payload: Dict[str, Any] = {"message": message}
        if image_url:
            payload["link"] = image_url

        try:
            data = (await self._post(f"{self.page_id}/feed", payload)).json()
        except Exception as e:
            logger.error(f"Failed to publish Facebook post: {e}")
            return None

        post_id = data.get("id") if isinstance(data, dict) else None
        if post_id:
            log_webhook_activity(
                "facebook",
                "post_published",
                {"message": message[:LOG_PREVIEW_CHARS], "imageUrl": image_url},
            )
        return post_id

    async def publish_instagram_post(self, image_url: str, caption: str = "") -> Optional[str]:
        """Create a media container, wait for Meta to process it, then publish."""
        try:
            created = (
                await self._post(
                    f"{self.instagram_business_id}/media",
                    {"image_url": image_url, "caption": caption or ""},
                )
            ).json()
            media_id = created.get("id")
            if not media_id:
                return None

            await asyncio.sleep(self.publish_wait)

            published = (
                await self._post(
                    f"{self.instagram_business_id}/media_publish", {"creation_id": media_id}
                )
            ).json()
        except Exception as e:
            logger.error(f"Failed to publish Instagram post: {e}")
            return None

        post_id = published.get("id") if isinstance(published, dict) else None
        if post_id:
            log_webhook_activity(
                "instagram",
                "post_published",
                {"imageUrl": image_url, "caption": (caption or "")[:LOG_PREVIEW_CHARS]},
            )
        return post_id

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def _insights_params(self, metrics: str) -> Dict[str, str]:
        since = date.today() - timedelta(days=METRICS_LOOKBACK_DAYS)
        return {"metric": metrics, "period": "day", "since": since.isoformat()}

    async def get_facebook_page_metrics(self) -> Optional[Dict[str, Any]]:
        try:
            return await self._get(
                f"{self.page_id}/insights", self._insights_params(FACEBOOK_PAGE_METRICS)
            )
        except Exception as e:
            logger.error(f"Failed to fetch Facebook page metrics: {e}")
            return None

    async def get_instagram_metrics(self) -> Optional[Dict[str, Any]]:
        try:
            return await self._get(
                f"{self.instagram_business_id}/insights",
                self._insights_params(INSTAGRAM_METRICS),
            )
        except Exception as e:
            logger.error(f"Failed to fetch Instagram metrics: {e}")
            return None


_service: Optional[MetaService] = None


def get_meta_service() -> MetaService:
    global _service
    if _service is None:
        _service = MetaService()
    return _service

"""
Notification Dispatcher - best-effort push messages.

Looks up the user's active push token and hands the message to a PushSender.
Nothing here ever raises to the caller: a missing token or a failed delivery
is logged and reported as False.
"""

from typing import Dict, Protocol
import logging

import httpx
from pydantic import BaseModel

from gastos.core.config import settings
from gastos.models.event import Event
from gastos.repositories.push_token_repo import PushTokenRepository

logger = logging.getLogger(__name__)


class PushMessage(BaseModel):
    title: str
    body: str
    data: Dict[str, str] = {}


class PushSender(Protocol):
    async def send(self, token: str, message: PushMessage) -> None:
        ...


class HttpPushSender:
    """Delivers messages to an HTTP push gateway."""

    def __init__(
        self,
        endpoint_url: str = settings.PUSH_ENDPOINT_URL,
        server_key: str = settings.PUSH_SERVER_KEY,
        timeout: float = settings.PUSH_TIMEOUT_SECONDS
    ):
        self.endpoint_url = endpoint_url
        self.server_key = server_key
        self.timeout = timeout

    async def send(self, token: str, message: PushMessage) -> None:
        if not self.endpoint_url:
            logger.info("PUSH_ENDPOINT_URL not configured; dropping push to token %s...", token[:8])
            return

        payload = {
            "token": token,
            "notification": {"title": message.title, "body": message.body},
            "data": message.data,
            "android": {"priority": "high"},
            "apns": {"payload": {"aps": {"sound": "default"}}}
        }
        headers = {"Authorization": f"Bearer {self.server_key}"} if self.server_key else {}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.endpoint_url, json=payload, headers=headers)
            response.raise_for_status()


class NotificationDispatcher:
    def __init__(self, push_tokens: PushTokenRepository, sender: PushSender):
        self.push_tokens = push_tokens
        self.sender = sender

    async def send(self, uid: str, message: PushMessage) -> bool:
        try:
            push_token = await self.push_tokens.find_active(uid)
            if push_token is None:
                logger.info("No active push token for user %s", uid)
                return False
            await self.sender.send(push_token.token, message)
        except Exception:
            logger.exception("Push notification to user %s failed", uid)
            return False

        logger.info("Push notification sent to user %s", uid)
        return True

    async def notify_event_closed(self, event: Event, uid: str, amount: float) -> bool:
        return await self.send(uid, PushMessage(
            title="Evento Cerrado",
            body=f'Evento "{event.titulo}" cerrado. Debes {amount:.2f} {event.moneda}',
            data={"tipo": "EVENTO_CERRADO", "evento_id": event.id}
        ))

    async def notify_new_participant(self, event: Event, alias: str) -> bool:
        return await self.send(event.creado_por, PushMessage(
            title="Nuevo Participante",
            body=f'{alias} se unió al evento "{event.titulo}"',
            data={"tipo": "NUEVO_PARTICIPANTE", "evento_id": event.id}
        ))

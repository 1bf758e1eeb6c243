"""
Change relay over Redis pub/sub.

Every API instance publishes inserted rows to Redis and every WebSocket
subscribes there, so a message sent through one worker reaches clients
connected to any other. Subscribers to a chat receive every new message;
translation events go to a channel keyed by (chat, user) so each viewer only
sees the rows written for them.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

import redis
import redis.asyncio
from redis.exceptions import RedisError

from app.constants.chat import ChangeTable
from app.infra.logging_config import get_logger
from app.infra.redis_client import get_async_redis_client, get_redis_client
from app.schemas.chat import MessageRead, TranslationRead
from app.schemas.realtime import ChangeEvent

logger = get_logger("relay")

CHANNEL_PREFIX = "polyglot"


def message_channel(chat_id: UUID) -> str:
    return f"{CHANNEL_PREFIX}:messages:{chat_id}"


def translation_channel(chat_id: UUID, user_id: UUID) -> str:
    return f"{CHANNEL_PREFIX}:translations:{chat_id}:{user_id}"


class Subscription:
    """One WebSocket's view of a chat: its message and translation channels."""

    def __init__(self, pubsub: redis.asyncio.client.PubSub, channels: List[str]) -> None:
        self.pubsub = pubsub
        self.channels = channels

    async def get(self) -> ChangeEvent:
        while True:
            message = await self.pubsub.get_message(
                ignore_subscribe_messages=True, timeout=None
            )
            if message is None or message.get("type") != "message":
                continue
            return ChangeEvent.model_validate_json(message["data"])

    async def close(self) -> None:
        await self.pubsub.unsubscribe(*self.channels)
        await self.pubsub.aclose()


class ChangeRelay:
    def __init__(
        self,
        redis_client: redis.Redis,
        async_redis_client: redis.asyncio.Redis,
    ) -> None:
        self.redis_client = redis_client
        self.async_redis_client = async_redis_client

    async def subscribe(self, chat_id: UUID, user_id: UUID) -> Subscription:
        channels = [message_channel(chat_id), translation_channel(chat_id, user_id)]
        pubsub = self.async_redis_client.pubsub()
        await pubsub.subscribe(*channels)
        return Subscription(pubsub, channels)

    async def unsubscribe(self, sub: Subscription) -> None:
        try:
            await sub.close()
        except RedisError as e:
            logger.debug("Error closing subscription %s: %s", sub.channels, e)

    def publish_message(self, message: MessageRead) -> None:
        event = ChangeEvent(
            table=ChangeTable.MESSAGES,
            type="INSERT",
            record=message.model_dump(mode="json"),
        )
        self._publish(message_channel(message.chat_id), event)

    def publish_translation(self, chat_id: UUID, translation: TranslationRead) -> None:
        event = ChangeEvent(
            table=ChangeTable.MESSAGE_TRANSLATIONS,
            type="INSERT",
            record=translation.model_dump(mode="json"),
        )
        self._publish(translation_channel(chat_id, translation.user_id), event)

    def _publish(self, channel: str, event: ChangeEvent) -> None:
        # The row is already committed; realtime delivery is best effort
        try:
            self.redis_client.publish(channel, event.model_dump_json())
        except RedisError:
            logger.exception("Failed to publish %s event to %s", event.table, channel)


_relay: Optional[ChangeRelay] = None


def get_change_relay() -> ChangeRelay:
    """FastAPI dependency; also the default for commands built outside a request."""
    global _relay
    if _relay is None:
        _relay = ChangeRelay(get_redis_client(), get_async_redis_client())
    return _relay

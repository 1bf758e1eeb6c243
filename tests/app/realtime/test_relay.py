"""Tests for the Redis pub/sub change relay."""

import asyncio
import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.constants.chat import ChangeTable
from app.realtime.relay import (
    ChangeRelay,
    get_change_relay,
    message_channel,
    translation_channel,
)
from app.schemas.chat import MessageRead, TranslationRead

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class UnreachableRedis:
    def publish(self, channel, data):
        raise RedisConnectionError("Connection refused")


def _message(chat_id):
    return MessageRead(
        id=uuid4(),
        chat_id=chat_id,
        sender_id=uuid4(),
        sender_type="user",
        original_text="Hello",
        source_language="en",
        created_at=NOW,
    )


def _translation(user_id):
    return TranslationRead(
        id=uuid4(),
        message_id=uuid4(),
        user_id=user_id,
        target_language="es",
        translated_text="Hola",
        created_at=NOW,
    )


def test_channel_names():
    chat_id, user_id = uuid4(), uuid4()
    assert message_channel(chat_id) == f"polyglot:messages:{chat_id}"
    assert translation_channel(chat_id, user_id) == (
        f"polyglot:translations:{chat_id}:{user_id}"
    )


def test_publish_message_writes_change_event(change_relay, fake_redis):
    chat_id = uuid4()
    change_relay.publish_message(_message(chat_id))

    [(channel, data)] = fake_redis.published
    assert channel == message_channel(chat_id)
    payload = json.loads(data)
    assert payload["table"] == "messages"
    assert payload["type"] == "INSERT"
    assert payload["record"]["chat_id"] == str(chat_id)


@pytest.mark.asyncio
async def test_message_reaches_every_chat_subscriber(change_relay):
    chat_id = uuid4()
    first = await change_relay.subscribe(chat_id, uuid4())
    second = await change_relay.subscribe(chat_id, uuid4())
    other_chat = await change_relay.subscribe(uuid4(), uuid4())

    change_relay.publish_message(_message(chat_id))

    for sub in (first, second):
        event = await asyncio.wait_for(sub.get(), timeout=1)
        assert event.table == ChangeTable.MESSAGES
        assert event.record["original_text"] == "Hello"
    assert await other_chat.pubsub.get_message(timeout=0) is None


@pytest.mark.asyncio
async def test_translation_only_reaches_its_user(change_relay):
    chat_id, alice, bob = uuid4(), uuid4(), uuid4()
    alice_sub = await change_relay.subscribe(chat_id, alice)
    bob_sub = await change_relay.subscribe(chat_id, bob)

    change_relay.publish_translation(chat_id, _translation(bob))

    event = await asyncio.wait_for(bob_sub.get(), timeout=1)
    assert event.table == ChangeTable.MESSAGE_TRANSLATIONS
    assert event.record["user_id"] == str(bob)
    assert await alice_sub.pubsub.get_message(timeout=0) is None


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery(change_relay, fake_redis):
    chat_id = uuid4()
    sub = await change_relay.subscribe(chat_id, uuid4())
    assert message_channel(chat_id) in fake_redis.channels

    await change_relay.unsubscribe(sub)
    change_relay.publish_message(_message(chat_id))

    assert fake_redis.channels == {}
    assert sub.pubsub.closed is True
    assert await sub.pubsub.get_message(timeout=0) is None


@pytest.mark.asyncio
async def test_relays_share_one_broker(fake_redis, fake_async_redis):
    # Two API workers with their own relay objects over the same Redis
    publisher = ChangeRelay(fake_redis, fake_async_redis)
    listener = ChangeRelay(fake_redis, fake_async_redis)
    chat_id = uuid4()
    sub = await listener.subscribe(chat_id, uuid4())

    publisher.publish_message(_message(chat_id))

    event = await asyncio.wait_for(sub.get(), timeout=1)
    assert event.record["chat_id"] == str(chat_id)
    await listener.unsubscribe(sub)


@pytest.mark.asyncio
async def test_publish_from_worker_thread(change_relay):
    chat_id = uuid4()
    sub = await change_relay.subscribe(chat_id, uuid4())

    await asyncio.to_thread(change_relay.publish_message, _message(chat_id))

    event = await asyncio.wait_for(sub.get(), timeout=1)
    assert event.record["chat_id"] == str(chat_id)


def test_publish_failure_is_logged_not_raised(fake_async_redis, caplog):
    relay = ChangeRelay(UnreachableRedis(), fake_async_redis)

    relay.publish_message(_message(uuid4()))

    assert "Failed to publish" in caplog.text


def test_default_relay_is_shared(change_relay):
    assert get_change_relay() is change_relay

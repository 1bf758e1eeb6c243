"""Fixtures for chats, participants and messages."""

from datetime import timedelta

import pytest

from app.constants.chat import ChatType, SenderType
from app.models.chat import Chat, ChatParticipant
from app.models.message import Message, MessageReaction, MessageReadReceipt
from app.models.message_translation import MessageTranslation
from app.utils.datetime_utils import utcnow


@pytest.fixture
def make_chat(db):
    def _make(member_ids, created_by=None, is_ephemeral=False, delete_after=None):
        chat = Chat(
            type=ChatType.DIRECT.value if len(member_ids) == 2 else ChatType.GROUP.value,
            created_by=created_by or member_ids[0],
            is_ephemeral=is_ephemeral,
            delete_after=delete_after,
        )
        db.add(chat)
        db.flush()
        for member_id in member_ids:
            db.add(ChatParticipant(chat_id=chat.id, user_id=member_id))
        db.commit()
        db.refresh(chat)
        return chat

    return _make


@pytest.fixture(scope="function")
def setup_direct_chat(make_chat, setup_profile, setup_profile_es):
    """Direct chat between an English and a Spanish speaker."""
    return make_chat([setup_profile.id, setup_profile_es.id])


@pytest.fixture
def make_message(db):
    def _make(chat, sender_id, text="Hello", source_language="en"):
        message = Message(
            chat_id=chat.id,
            sender_id=sender_id,
            sender_type=SenderType.USER.value,
            original_text=text,
            source_language=source_language,
        )
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    return _make


@pytest.fixture
def make_expired_chat_with_history(db, make_chat, make_message, setup_profile, setup_profile_es):
    """Ephemeral chat past its delete_after, with one message and all dependents."""

    def _make(minutes_ago=10):
        chat = make_chat(
            [setup_profile.id, setup_profile_es.id],
            is_ephemeral=True,
            delete_after=utcnow() - timedelta(minutes=minutes_ago),
        )
        message = make_message(chat, setup_profile.id)
        db.add_all(
            [
                MessageTranslation(
                    message_id=message.id,
                    user_id=setup_profile_es.id,
                    target_language="es",
                    translated_text="Hola",
                ),
                MessageReaction(
                    message_id=message.id, user_id=setup_profile_es.id, reaction="👍"
                ),
                MessageReadReceipt(message_id=message.id, user_id=setup_profile_es.id),
            ]
        )
        db.commit()
        return chat

    return _make

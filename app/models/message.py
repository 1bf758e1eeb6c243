"""Message model plus the reaction and read-receipt rows that hang off it."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import CreatedAtMixin
from app.utils.datetime_utils import utcnow


class Message(Base, CreatedAtMixin):
    """One authored message. created_at defines delivery and display order within a chat."""

    __tablename__ = "messages"

    __table_args__ = (
        Index("ix_messages_chat_id_created_at", "chat_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id = Column(
        Uuid,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id = Column(Uuid, nullable=False)  # profile id or guest session id
    sender_type = Column(String(16), nullable=False, default="user")  # 'user' | 'guest'
    original_text = Column(Text, nullable=False, default="")
    source_language = Column(String(16), nullable=False)
    attachment_url = Column(String(1024), nullable=True)
    attachment_type = Column(String(128), nullable=True)
    reply_to_id = Column(
        Uuid,
        ForeignKey("messages.id", ondelete="SET NULL"),
        nullable=True,
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)

    chat = relationship("Chat", back_populates="messages")
    translations = relationship(
        "MessageTranslation",
        back_populates="message",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class MessageReaction(Base, CreatedAtMixin):
    __tablename__ = "message_reactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message_id = Column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid, nullable=False)
    reaction = Column(String(32), nullable=False)


class MessageReadReceipt(Base):
    __tablename__ = "message_read_receipts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message_id = Column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True, default=utcnow)

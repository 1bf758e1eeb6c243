"""Chat and ChatParticipant models."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import CreatedAtMixin
from app.utils.datetime_utils import utcnow


class Chat(Base, CreatedAtMixin):
    """A direct or group chat. Ephemeral chats are removed by the reaper after delete_after."""

    __tablename__ = "chats"

    __table_args__ = (
        Index("ix_chats_ephemeral_delete_after", "is_ephemeral", "delete_after"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(String(16), nullable=False, default="direct")  # 'direct' | 'group'
    name = Column(String(256), nullable=True)
    created_by = Column(Uuid, nullable=True, index=True)
    is_ephemeral = Column(Boolean, nullable=False, default=False)
    delete_after = Column(DateTime(timezone=True), nullable=True)
    guest_session_id = Column(
        Uuid,
        ForeignKey("guest_sessions.id", ondelete="SET NULL"),
        nullable=True,
    )
    active = Column(Boolean, nullable=False, default=True)

    participants = relationship(
        "ChatParticipant",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )


class ChatParticipant(Base):
    """
    Membership row. user_id is either a profile id or a guest session id, so it
    carries no foreign key.
    """

    __tablename__ = "chat_participants"

    __table_args__ = (
        UniqueConstraint("chat_id", "user_id", name="uq_chat_participants_chat_user"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id = Column(
        Uuid,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid, nullable=False, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    chat = relationship("Chat", back_populates="participants")

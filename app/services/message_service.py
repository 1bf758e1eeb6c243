"""Message persistence and chat history queries."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Query, Session

from app.constants.chat import SenderType
from app.models.message import Message


class MessageService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_message(self, message_id: UUID) -> Optional[Message]:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def create_message(
        self,
        chat_id: UUID,
        sender_id: UUID,
        sender_type: SenderType,
        original_text: str,
        source_language: str,
        reply_to_id: Optional[UUID] = None,
        attachment_url: Optional[str] = None,
        attachment_type: Optional[str] = None,
    ) -> Message:
        """Insert and commit. The committed row is what makes the message 'sent'."""
        message = Message(
            chat_id=chat_id,
            sender_id=sender_id,
            sender_type=sender_type.value,
            original_text=original_text,
            source_language=source_language,
            reply_to_id=reply_to_id,
            attachment_url=attachment_url,
            attachment_type=attachment_type,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_messages_query(self, chat_id: UUID, include_deleted: bool = False) -> Query:
        """Messages of a chat in display order (created_at ascending)."""
        query = self.db.query(Message).filter(Message.chat_id == chat_id)
        if not include_deleted:
            query = query.filter(Message.is_deleted.is_(False))
        return query.order_by(Message.created_at, Message.id)

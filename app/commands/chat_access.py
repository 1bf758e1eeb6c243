"""Shared access check for chat-scoped commands."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from app.auth.dependencies import Principal
from app.exceptions import Forbidden, NotFound
from app.models.chat import Chat
from app.services.chat_service import ChatService


def load_chat_for(db: Session, chat_id: UUID, principal: Principal) -> Chat:
    """Return the chat if the principal may read and write it."""
    if principal.is_guest and principal.chat_id != chat_id:
        raise Forbidden("Credential is not valid for this chat")
    chat_service = ChatService(db)
    chat = chat_service.get_chat(chat_id)
    if chat is None:
        raise NotFound("Chat not found")
    if not chat_service.is_participant(chat_id, principal.id):
        raise Forbidden("Not a participant of this chat")
    return chat

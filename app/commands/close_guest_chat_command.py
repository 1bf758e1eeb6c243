"""Command to schedule a guest chat for deletion."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.auth.dependencies import Principal
from app.commands.chat_access import load_chat_for
from app.config import get_settings
from app.models.chat import Chat
from app.services.chat_service import ChatService


class CloseGuestChatCommand:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.logger = logging.getLogger(__name__)

    def execute(
        self,
        chat_id: UUID,
        principal: Principal,
        minutes_until_delete: Optional[int] = None,
    ) -> Chat:
        """Set delete_after and mark ephemeral. Never deletes; the reaper does that."""
        chat = load_chat_for(self.db, chat_id, principal)
        minutes = (
            get_settings().close_default_minutes
            if minutes_until_delete is None
            else minutes_until_delete
        )
        chat = ChatService(self.db).schedule_deletion(chat, minutes)
        self.logger.info(
            "Chat %s scheduled for deletion at %s by %s",
            chat_id,
            chat.delete_after,
            principal.id,
        )
        return chat

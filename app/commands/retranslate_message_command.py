"""Command to fill in translation rows a previous fan-out could not produce."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.auth.dependencies import Principal
from app.commands.chat_access import load_chat_for
from app.commands.fan_out_translations_command import (
    FanOutResult,
    FanOutTranslationsCommand,
)
from app.exceptions import NotFound
from app.realtime.relay import ChangeRelay
from app.services.message_service import MessageService
from app.workers.translator import TranslationProvider


class RetranslateMessageCommand:
    def __init__(
        self,
        db: Session,
        provider: TranslationProvider,
        relay: Optional[ChangeRelay] = None,
    ) -> None:
        self.db = db
        self.provider = provider
        self.relay = relay

    async def execute(self, message_id: UUID, principal: Principal) -> FanOutResult:
        message = MessageService(self.db).get_message(message_id)
        if message is None or message.is_deleted:
            raise NotFound("Message not found")
        load_chat_for(self.db, message.chat_id, principal)
        return await FanOutTranslationsCommand(
            self.db, self.provider, relay=self.relay
        ).execute(message, only_missing=True)

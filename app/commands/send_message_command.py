"""Commands to ingest a message from a user or a guest and fan it out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.auth.dependencies import Principal
from app.commands.chat_access import load_chat_for
from app.commands.fan_out_translations_command import (
    FanOutResult,
    FanOutTranslationsCommand,
)
from app.config import get_settings
from app.constants.chat import ParticipantKind, SenderType
from app.core.guest_credentials import verify_guest_credential
from app.exceptions import Forbidden, InvalidInput, Unauthorized
from app.models.message import Message
from app.realtime.relay import ChangeRelay, get_change_relay
from app.schemas.chat import MessageRead
from app.services.guest_session_service import GuestSessionService
from app.services.message_service import MessageService
from app.services.participant_resolver import ParticipantResolver
from app.workers.translator import TranslationProvider


@dataclass
class SentMessage:
    message: Message
    fan_out: FanOutResult


class SendMessageCommand:
    """
    Store a message, publish it, then translate it for every participant.

    The message insert is the only step whose failure reaches the caller.
    """

    def __init__(
        self,
        db: Session,
        provider: TranslationProvider,
        relay: Optional[ChangeRelay] = None,
    ) -> None:
        self.db = db
        self.provider = provider
        self.relay = relay if relay is not None else get_change_relay()
        self.logger = logging.getLogger(__name__)

    async def execute(
        self,
        principal: Principal,
        chat_id: UUID,
        text: Optional[str],
        source_language: Optional[str] = None,
        reply_to_id: Optional[UUID] = None,
        attachment_url: Optional[str] = None,
        attachment_type: Optional[str] = None,
    ) -> SentMessage:
        text = (text or "").strip()
        if not text and not attachment_url:
            raise InvalidInput("Message text or attachment required")
        if len(text) > get_settings().max_message_length:
            raise InvalidInput("Message too long")

        load_chat_for(self.db, chat_id, principal)

        message_service = MessageService(self.db)
        if reply_to_id is not None:
            parent = message_service.get_message(reply_to_id)
            if parent is None or parent.chat_id != chat_id:
                raise InvalidInput("reply_to_id must reference a message in this chat")

        source = (source_language or "").strip() or self._sender_language(principal.id)
        sender_type = (
            SenderType.GUEST
            if principal.kind == ParticipantKind.GUEST
            else SenderType.USER
        )

        message = message_service.create_message(
            chat_id=chat_id,
            sender_id=principal.id,
            sender_type=sender_type,
            original_text=text,
            source_language=source,
            reply_to_id=reply_to_id,
            attachment_url=attachment_url,
            attachment_type=attachment_type,
        )
        self.logger.info(
            "Message %s stored in chat %s by %s %s",
            message.id,
            chat_id,
            sender_type.value,
            principal.id,
        )
        self.relay.publish_message(MessageRead.model_validate(message))

        fan_out = await FanOutTranslationsCommand(
            self.db, self.provider, relay=self.relay
        ).execute(message)
        return SentMessage(message=message, fan_out=fan_out)

    def _sender_language(self, sender_id: UUID) -> str:
        resolver = ParticipantResolver(self.db)
        return resolver.language_of(sender_id) or resolver.default_language


class SendGuestMessageCommand:
    """Verify a guest credential against the target chat, then send as that guest."""

    def __init__(
        self,
        db: Session,
        provider: TranslationProvider,
        relay: Optional[ChangeRelay] = None,
    ) -> None:
        self.db = db
        self.provider = provider
        self.relay = relay
        self.logger = logging.getLogger(__name__)

    async def execute(
        self,
        guest_credential: str,
        chat_id: UUID,
        text: Optional[str],
        reply_to_id: Optional[UUID] = None,
        attachment_url: Optional[str] = None,
        attachment_type: Optional[str] = None,
    ) -> SentMessage:
        claims = verify_guest_credential(guest_credential)
        if claims.chat_id != chat_id:
            self.logger.warning(
                "Guest %s presented a credential for chat %s on chat %s",
                claims.guest_session_id,
                claims.chat_id,
                chat_id,
            )
            raise Forbidden("Credential is not valid for this chat")

        guest_service = GuestSessionService(self.db)
        guest = guest_service.get_guest_session(claims.guest_session_id)
        if guest is None or guest_service.is_expired(guest):
            raise Unauthorized("Guest session expired")
        guest_service.touch(guest)

        principal = Principal(
            id=guest.id, kind=ParticipantKind.GUEST, chat_id=claims.chat_id
        )
        return await SendMessageCommand(
            self.db, self.provider, relay=self.relay
        ).execute(
            principal,
            chat_id,
            text,
            source_language=guest.preferred_language,
            reply_to_id=reply_to_id,
            attachment_url=attachment_url,
            attachment_type=attachment_type,
        )

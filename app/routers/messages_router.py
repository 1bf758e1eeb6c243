"""Messages API: send (user and guest), history, retranslate."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi_pagination import Page, Params
from sqlalchemy.orm import Session

from app.auth.dependencies import Principal, get_chat_principal, get_current_user
from app.commands.load_chat_messages_command import LoadChatMessagesCommand
from app.commands.retranslate_message_command import RetranslateMessageCommand
from app.commands.send_message_command import (
    SendGuestMessageCommand,
    SendMessageCommand,
)
from app.constants.chat import ParticipantKind
from app.db import get_db
from app.models.profile import Profile
from app.realtime.relay import ChangeRelay, get_change_relay
from app.schemas.chat import (
    ChatMessageRow,
    RetranslateResponse,
    SendGuestMessageRequest,
    SendGuestMessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from app.workers.translator import TranslationProvider, get_translation_provider

messages_router = APIRouter(tags=["Message"])


@messages_router.post("/messages", response_model=SendMessageResponse)
async def send_message(
    data: SendMessageRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: TranslationProvider = Depends(get_translation_provider),
    relay: ChangeRelay = Depends(get_change_relay),
) -> SendMessageResponse:
    """Store a message and fan out translations to every participant."""
    sent = await SendMessageCommand(db, provider, relay=relay).execute(
        Principal(id=current_user.id, kind=ParticipantKind.USER),
        data.chat_id,
        data.message,
        source_language=data.source_language,
        reply_to_id=data.reply_to_id,
        attachment_url=data.attachment_url,
        attachment_type=data.attachment_type,
    )
    return SendMessageResponse(success=True, message_id=sent.message.id)


@messages_router.post("/guest-messages", response_model=SendGuestMessageResponse)
async def send_guest_message(
    data: SendGuestMessageRequest,
    db: Session = Depends(get_db),
    provider: TranslationProvider = Depends(get_translation_provider),
    relay: ChangeRelay = Depends(get_change_relay),
) -> SendGuestMessageResponse:
    """Send as a guest; the credential must be bound to chatId."""
    sent = await SendGuestMessageCommand(db, provider, relay=relay).execute(
        data.guest_credential,
        data.chat_id,
        data.message,
        reply_to_id=data.reply_to_id,
        attachment_url=data.attachment_url,
        attachment_type=data.attachment_type,
    )
    return SendGuestMessageResponse(
        message_id=sent.message.id, created_at=sent.message.created_at
    )


@messages_router.get("/chats/{chat_id}/messages", response_model=Page[ChatMessageRow])
def load_chat_messages(
    chat_id: UUID,
    params: Params = Depends(),
    principal: Principal = Depends(get_chat_principal),
    db: Session = Depends(get_db),
) -> Page[ChatMessageRow]:
    """Chat history for a participant, oldest first."""
    return LoadChatMessagesCommand(db).execute(chat_id, principal, params)


@messages_router.post(
    "/messages/{message_id}/retranslate", response_model=RetranslateResponse
)
async def retranslate_message(
    message_id: UUID,
    principal: Principal = Depends(get_chat_principal),
    db: Session = Depends(get_db),
    provider: TranslationProvider = Depends(get_translation_provider),
    relay: ChangeRelay = Depends(get_change_relay),
) -> RetranslateResponse:
    """Create the translation rows a previous fan-out could not."""
    result = await RetranslateMessageCommand(db, provider, relay=relay).execute(
        message_id, principal
    )
    return RetranslateResponse(
        message_id=message_id,
        created=len(result.translations),
        failed_languages=result.failed_languages,
    )

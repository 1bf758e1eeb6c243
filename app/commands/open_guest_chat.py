"""Shared steps for every flow that seats a new guest opposite an inviter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import Settings
from app.core.guest_credentials import mint_guest_credential
from app.models.chat import Chat
from app.models.guest import GuestSession
from app.schemas.guest import GuestChatGrant
from app.services.chat_service import ChatService
from app.services.guest_session_service import GuestSessionService


@dataclass
class OpenedGuestChat:
    chat: Chat
    guest: GuestSession


def open_guest_chat(
    db: Session,
    inviter_id: UUID,
    display_name: str,
    preferred_language: str,
    session_expires_at: datetime,
    chat_delete_after: datetime,
    invite_id: Optional[UUID] = None,
    chat_name: Optional[str] = None,
    link_guest_session: bool = False,
) -> OpenedGuestChat:
    """
    Create the guest session, the ephemeral direct chat and both participant
    rows. Only flushes; the caller commits so the whole start is one transaction.
    """
    guest = GuestSessionService(db).create_guest_session(
        display_name=display_name,
        preferred_language=preferred_language,
        expires_at=session_expires_at,
        invite_id=invite_id,
        commit=False,
    )
    chat = ChatService(db).create_ephemeral_direct_chat(
        created_by=inviter_id,
        participant_ids=[inviter_id, guest.id],
        delete_after=chat_delete_after,
        name=chat_name,
        guest_session_id=guest.id if link_guest_session else None,
        commit=False,
    )
    return OpenedGuestChat(chat=chat, guest=guest)


def grant_for(
    chat_id: UUID,
    guest: GuestSession,
    settings: Settings,
    reused: bool = False,
) -> GuestChatGrant:
    token, expires_at = mint_guest_credential(guest.id, chat_id, settings=settings)
    return GuestChatGrant(
        chat_id=chat_id,
        guest_session_id=guest.id,
        display_name=guest.display_name,
        preferred_language=guest.preferred_language,
        guest_credential=token,
        credential_expires_at=expires_at,
        reused=reused,
    )

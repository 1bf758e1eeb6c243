"""Command to load a chat's history as seen by one participant."""

from __future__ import annotations

from typing import List, Sequence
from uuid import UUID

from fastapi_pagination import Page, Params, create_page
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.auth.dependencies import Principal
from app.commands.chat_access import load_chat_for
from app.models.message import Message
from app.schemas.chat import ChatMessageRow
from app.services.guest_session_service import GuestSessionService
from app.services.message_service import MessageService
from app.services.message_translation_service import MessageTranslationService
from app.services.profile_service import ProfileService

UNKNOWN_SENDER = "Unknown"


class LoadChatMessagesCommand:
    def __init__(self, db: Session) -> None:
        self.db = db

    def execute(
        self, chat_id: UUID, principal: Principal, params: Params
    ) -> Page[ChatMessageRow]:
        """
        One page of messages in created_at order, with sender names and the
        caller's own translation. translated_text is None where no translation
        row exists; clients show original_text in that case.
        """
        load_chat_for(self.db, chat_id, principal)
        query = MessageService(self.db).get_messages_query(chat_id)
        page = paginate(query, params=params)
        rows = self._to_rows(page.items, principal.id)
        return create_page(rows, total=page.total, params=params)

    def _to_rows(
        self, messages: Sequence[Message], viewer_id: UUID
    ) -> List[ChatMessageRow]:
        if not messages:
            return []

        sender_ids = list({m.sender_id for m in messages})
        names = {
            p.id: p.name for p in ProfileService(self.db).get_profiles_by_ids(sender_ids)
        }
        for guest in GuestSessionService(self.db).get_guest_sessions_by_ids(
            [sid for sid in sender_ids if sid not in names]
        ):
            names[guest.id] = guest.display_name

        translations = {
            t.message_id: t.translated_text
            for t in MessageTranslationService(self.db).get_translations_for_user(
                [m.id for m in messages], viewer_id
            )
        }

        return [
            ChatMessageRow(
                id=m.id,
                chat_id=m.chat_id,
                sender_id=m.sender_id,
                sender_type=m.sender_type,
                sender_name=names.get(m.sender_id) or UNKNOWN_SENDER,
                original_text=m.original_text,
                source_language=m.source_language,
                translated_text=translations.get(m.id),
                attachment_url=m.attachment_url,
                attachment_type=m.attachment_type,
                reply_to_id=m.reply_to_id,
                created_at=m.created_at,
            )
            for m in messages
        ]

"""Chat and participant queries plus ephemeral-chat bookkeeping."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.constants.chat import ChatType
from app.models.chat import Chat, ChatParticipant
from app.utils.datetime_utils import utcnow


class ChatService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_chat(self, chat_id: UUID) -> Optional[Chat]:
        return self.db.query(Chat).filter(Chat.id == chat_id).first()

    def get_participant_ids(self, chat_id: UUID) -> List[UUID]:
        rows = (
            self.db.query(ChatParticipant.user_id)
            .filter(ChatParticipant.chat_id == chat_id)
            .order_by(ChatParticipant.joined_at)
            .all()
        )
        return [r.user_id for r in rows]

    def is_participant(self, chat_id: UUID, user_id: UUID) -> bool:
        return (
            self.db.query(ChatParticipant.id)
            .filter(
                ChatParticipant.chat_id == chat_id,
                ChatParticipant.user_id == user_id,
            )
            .first()
            is not None
        )

    def create_ephemeral_direct_chat(
        self,
        created_by: UUID,
        participant_ids: Sequence[UUID],
        delete_after: datetime,
        name: Optional[str] = None,
        guest_session_id: Optional[UUID] = None,
        commit: bool = True,
    ) -> Chat:
        """Create a direct, ephemeral chat with exactly two distinct participants."""
        unique_ids = list(dict.fromkeys(participant_ids))
        if len(unique_ids) != 2:
            raise ValueError("A direct chat needs exactly two distinct participants")
        chat = Chat(
            type=ChatType.DIRECT.value,
            name=name,
            created_by=created_by,
            is_ephemeral=True,
            delete_after=delete_after,
            guest_session_id=guest_session_id,
            active=True,
        )
        self.db.add(chat)
        self.db.flush()
        for user_id in unique_ids:
            self.db.add(ChatParticipant(chat_id=chat.id, user_id=user_id))
        if commit:
            self.db.commit()
            self.db.refresh(chat)
        else:
            self.db.flush()
        return chat

    def schedule_deletion(self, chat: Chat, minutes_until_delete: int) -> Chat:
        """Mark ephemeral and set delete_after; the reaper does the actual delete.

        A closed chat is also deactivated so QR reuse never hands it out again.
        """
        chat.is_ephemeral = True
        chat.active = False
        chat.delete_after = utcnow() + timedelta(minutes=minutes_until_delete)
        self.db.commit()
        self.db.refresh(chat)
        return chat

    def find_reusable_guest_chat(
        self,
        inviter_id: UUID,
        now: Optional[datetime] = None,
    ) -> List[Chat]:
        """
        Live ephemeral chats created by the inviter whose participants are the
        inviter plus exactly one other party, newest first.
        """
        now = now or utcnow()
        two_party = (
            self.db.query(ChatParticipant.chat_id)
            .group_by(ChatParticipant.chat_id)
            .having(func.count(ChatParticipant.id) == 2)
            .subquery()
        )
        return (
            self.db.query(Chat)
            .join(two_party, two_party.c.chat_id == Chat.id)
            .join(ChatParticipant, ChatParticipant.chat_id == Chat.id)
            .filter(
                Chat.created_by == inviter_id,
                Chat.is_ephemeral.is_(True),
                Chat.active.is_(True),
                Chat.delete_after > now,
                ChatParticipant.user_id == inviter_id,
            )
            .order_by(Chat.created_at.desc())
            .all()
        )

    def get_expired_ephemeral_chat_ids(
        self, now: Optional[datetime] = None
    ) -> List[UUID]:
        now = now or utcnow()
        rows = (
            self.db.query(Chat.id)
            .filter(Chat.is_ephemeral.is_(True), Chat.delete_after < now)
            .all()
        )
        return [r.id for r in rows]

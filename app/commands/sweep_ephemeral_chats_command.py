"""Command to delete expired ephemeral chats and everything hanging off them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.chat import Chat, ChatParticipant
from app.models.message import Message, MessageReaction, MessageReadReceipt
from app.models.message_translation import MessageTranslation
from app.services.chat_service import ChatService
from app.services.qr_rate_limit_service import QrRateLimitService
from app.utils.datetime_utils import utcnow


@dataclass
class SweepResult:
    deleted_count: int = 0
    failed_count: int = 0
    purged_rate_limit_rows: int = 0


class SweepEphemeralChatsCommand:
    """
    Each batch of chat ids is deleted in its own transaction, dependents
    first. A failing batch is rolled back and logged; later batches still run.
    """

    def __init__(self, db: Session, batch_size: Optional[int] = None) -> None:
        self.db = db
        self.settings = get_settings()
        self.batch_size = batch_size or self.settings.reaper_batch_size
        self.logger = logging.getLogger(__name__)

    def execute(self, now: Optional[datetime] = None) -> SweepResult:
        now = now or utcnow()
        chat_ids = ChatService(self.db).get_expired_ephemeral_chat_ids(now=now)
        result = SweepResult()
        if chat_ids:
            self.logger.info("Sweeping %d expired ephemeral chats", len(chat_ids))

        for start in range(0, len(chat_ids), self.batch_size):
            batch = chat_ids[start : start + self.batch_size]
            try:
                self._delete_batch(batch)
                self.db.commit()
                result.deleted_count += len(batch)
            except SQLAlchemyError as e:
                self.db.rollback()
                result.failed_count += len(batch)
                self.logger.error(
                    "Failed to delete chat batch of %d (first %s): %s",
                    len(batch),
                    batch[0],
                    e,
                )

        result.purged_rate_limit_rows = self._purge_rate_limits(now)
        self.logger.info(
            "Sweep finished: deleted=%d failed=%d purged_rate_limit_rows=%d",
            result.deleted_count,
            result.failed_count,
            result.purged_rate_limit_rows,
        )
        return result

    def _delete_batch(self, chat_ids: List[UUID]) -> None:
        message_ids = select(Message.id).where(Message.chat_id.in_(chat_ids))
        self._delete(MessageTranslation, MessageTranslation.message_id.in_(message_ids))
        self._delete(MessageReaction, MessageReaction.message_id.in_(message_ids))
        self._delete(MessageReadReceipt, MessageReadReceipt.message_id.in_(message_ids))
        self._delete(Message, Message.chat_id.in_(chat_ids))
        self._delete(ChatParticipant, ChatParticipant.chat_id.in_(chat_ids))
        self._delete(Chat, Chat.id.in_(chat_ids))

    def _delete(self, model, criterion) -> int:
        return (
            self.db.query(model)
            .filter(criterion)
            .delete(synchronize_session=False)
        )

    def _purge_rate_limits(self, now: datetime) -> int:
        cutoff = now - timedelta(minutes=self.settings.rate_limit_retention_minutes)
        try:
            return QrRateLimitService(self.db).purge_older_than(cutoff)
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error("Failed to purge QR rate limit rows: %s", e)
            return 0

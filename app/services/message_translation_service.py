"""
Persistence for MessageTranslation rows.

Rows are insert-only. A failed insert for one row never takes the others down.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.infra.logging_config import get_logger
from app.models.message_translation import MessageTranslation
from app.schemas.chat import TranslationCreate

logger = get_logger("message_translations")


class MessageTranslationService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_translations_for_message(self, message_id: UUID) -> List[MessageTranslation]:
        return (
            self.db.query(MessageTranslation)
            .filter(MessageTranslation.message_id == message_id)
            .all()
        )

    def get_translations_for_user(
        self, message_ids: Iterable[UUID], user_id: UUID
    ) -> List[MessageTranslation]:
        ids = list(message_ids)
        if not ids:
            return []
        return (
            self.db.query(MessageTranslation)
            .filter(
                MessageTranslation.message_id.in_(ids),
                MessageTranslation.user_id == user_id,
            )
            .all()
        )

    def create_translations(
        self, rows: Sequence[TranslationCreate]
    ) -> List[MessageTranslation]:
        """Insert all rows in one commit; if that fails, fall back to one commit per row."""
        if not rows:
            return []
        created = [MessageTranslation(**row.model_dump()) for row in rows]
        try:
            self.db.add_all(created)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "Bulk translation insert failed for message %s; inserting row by row",
                rows[0].message_id,
            )
            return self._create_individually(rows)
        for t in created:
            self.db.refresh(t)
        return created

    def _create_individually(
        self, rows: Sequence[TranslationCreate]
    ) -> List[MessageTranslation]:
        created: List[MessageTranslation] = []
        for row in rows:
            translation = MessageTranslation(**row.model_dump())
            try:
                self.db.add(translation)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    "Translation insert failed for message %s user %s: %s",
                    row.message_id,
                    row.user_id,
                    e,
                )
                continue
            self.db.refresh(translation)
            created.append(translation)
        return created

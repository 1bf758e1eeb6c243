"""MessageTranslation model: the per-recipient rendering of a message."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import CreatedAtMixin


class MessageTranslation(Base, CreatedAtMixin):
    """Created once by the fan-out, never updated. Absent row means the client shows the original."""

    __tablename__ = "message_translations"

    __table_args__ = (
        UniqueConstraint(
            "message_id",
            "user_id",
            "target_language",
            name="uq_message_translations_message_user_language",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message_id = Column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid, nullable=False, index=True)
    target_language = Column(String(16), nullable=False)
    translated_text = Column(Text, nullable=False)

    message = relationship("Message", back_populates="translations")

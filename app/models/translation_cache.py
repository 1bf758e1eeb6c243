"""TranslationCache model: content-keyed dedup of provider calls."""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text

from app.db import Base
from app.models.mixins import CreatedAtMixin
from app.utils.datetime_utils import utcnow


class TranslationCache(Base, CreatedAtMixin):
    """Keyed by sha256(source|target|text), independent of message identity."""

    __tablename__ = "translation_cache"

    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    hash = Column(String(64), unique=True, nullable=False, index=True)
    source_lang = Column(String(16), nullable=False)
    target_lang = Column(String(16), nullable=False)
    text = Column(Text, nullable=False)
    translated_text = Column(Text, nullable=False)
    last_used = Column(DateTime(timezone=True), nullable=False, default=utcnow)

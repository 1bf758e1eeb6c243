"""Content-keyed translation cache (last-write-wins)."""

from __future__ import annotations

import hashlib
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.translation_cache import TranslationCache
from app.utils.datetime_utils import utcnow


def cache_key(text: str, source_lang: str, target_lang: str) -> str:
    return hashlib.sha256(f"{source_lang}|{target_lang}|{text}".encode()).hexdigest()


class TranslationCacheService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def lookup(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """Return cached text and touch last_used, or None on miss."""
        entry = (
            self.db.query(TranslationCache)
            .filter(TranslationCache.hash == cache_key(text, source_lang, target_lang))
            .first()
        )
        if entry is None or not entry.translated_text:
            return None
        entry.last_used = utcnow()
        self.db.commit()
        return entry.translated_text

    def store(
        self, text: str, source_lang: str, target_lang: str, translated_text: str
    ) -> None:
        key = cache_key(text, source_lang, target_lang)
        entry = self.db.query(TranslationCache).filter(TranslationCache.hash == key).first()
        if entry is None:
            self.db.add(
                TranslationCache(
                    hash=key,
                    source_lang=source_lang,
                    target_lang=target_lang,
                    text=text,
                    translated_text=translated_text,
                )
            )
            try:
                self.db.commit()
                return
            except IntegrityError:
                # Another writer inserted the same key first
                self.db.rollback()
                entry = (
                    self.db.query(TranslationCache)
                    .filter(TranslationCache.hash == key)
                    .one()
                )
        entry.translated_text = translated_text
        entry.last_used = utcnow()
        self.db.commit()

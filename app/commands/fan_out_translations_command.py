"""Command to produce one translation row per chat participant for a message."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.message import Message
from app.realtime.relay import ChangeRelay, get_change_relay
from app.schemas.chat import ResolvedParticipant, TranslationCreate, TranslationRead
from app.services.message_translation_service import MessageTranslationService
from app.services.participant_resolver import ParticipantResolver
from app.services.translation_cache_service import TranslationCacheService
from app.workers.translator import TranslationProvider


@dataclass
class FanOutResult:
    translations: List[TranslationRead] = field(default_factory=list)
    failed_languages: List[str] = field(default_factory=list)


class FanOutTranslationsCommand:
    """
    Translate a stored message for every participant of its chat.

    Participants are grouped by target language. A language equal to the
    source gets the original text verbatim; every other language is served
    from the translation cache or by one provider call. A provider failure or
    timeout only drops the rows for that language.
    """

    def __init__(
        self,
        db: Session,
        provider: TranslationProvider,
        relay: Optional[ChangeRelay] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.db = db
        self.provider = provider
        self.relay = relay if relay is not None else get_change_relay()
        self.timeout_seconds = (
            timeout_seconds or get_settings().translation_timeout_seconds
        )
        self.logger = logging.getLogger(__name__)

    async def execute(
        self, message: Message, only_missing: bool = False
    ) -> FanOutResult:
        """
        Args:
            message: A committed message row
            only_missing: Skip participants that already have a row for this message

        Returns:
            FanOutResult with the rows created and the languages that failed
        """
        participants = ParticipantResolver(self.db).resolve(message.chat_id)
        if only_missing:
            existing = {
                t.user_id
                for t in MessageTranslationService(self.db).get_translations_for_message(
                    message.id
                )
            }
            participants = [p for p in participants if p.id not in existing]
        if not participants:
            return FanOutResult()

        by_language = self._group_by_language(participants)
        texts, failed = await self._texts_for_languages(message, list(by_language))

        rows = [
            TranslationCreate(
                message_id=message.id,
                user_id=p.id,
                target_language=language,
                translated_text=texts[language],
            )
            for language, members in by_language.items()
            if language in texts
            for p in members
        ]
        created = MessageTranslationService(self.db).create_translations(rows)
        result = FanOutResult(
            translations=[TranslationRead.model_validate(t) for t in created],
            failed_languages=failed,
        )
        for translation in result.translations:
            self.relay.publish_translation(message.chat_id, translation)

        self.logger.info(
            "Fan-out for message %s: %d rows, failed languages %s",
            message.id,
            len(result.translations),
            failed or "none",
        )
        return result

    @staticmethod
    def _group_by_language(
        participants: List[ResolvedParticipant],
    ) -> "OrderedDict[str, List[ResolvedParticipant]]":
        grouped: "OrderedDict[str, List[ResolvedParticipant]]" = OrderedDict()
        for p in participants:
            grouped.setdefault(p.target_language, []).append(p)
        return grouped

    async def _texts_for_languages(
        self, message: Message, languages: List[str]
    ) -> tuple[Dict[str, str], List[str]]:
        text = message.original_text or ""
        source = message.source_language
        cache = TranslationCacheService(self.db)

        texts: Dict[str, str] = {}
        misses: List[str] = []
        for language in languages:
            if language == source or not text.strip():
                texts[language] = text
                continue
            cached = self._cache_lookup(cache, text, source, language)
            if cached is not None:
                texts[language] = cached
            else:
                misses.append(language)

        if not misses:
            return texts, []

        outcomes = await asyncio.gather(
            *(self._translate(text, source, language) for language in misses),
            return_exceptions=True,
        )
        failed: List[str] = []
        for language, outcome in zip(misses, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.warning(
                    "Translation %s->%s failed for message %s: %r",
                    source,
                    language,
                    message.id,
                    outcome,
                )
                failed.append(language)
                continue
            texts[language] = outcome
            self._cache_store(cache, text, source, language, outcome)
        return texts, failed

    async def _translate(self, text: str, source: str, target: str) -> str:
        return await asyncio.wait_for(
            self.provider.translate(text, source, target),
            timeout=self.timeout_seconds,
        )

    def _cache_lookup(
        self, cache: TranslationCacheService, text: str, source: str, target: str
    ) -> Optional[str]:
        try:
            return cache.lookup(text, source, target)
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.warning("Translation cache lookup failed: %s", e)
            return None

    def _cache_store(
        self,
        cache: TranslationCacheService,
        text: str,
        source: str,
        target: str,
        translated: str,
    ) -> None:
        try:
            cache.store(text, source, target, translated)
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.warning("Translation cache write failed: %s", e)

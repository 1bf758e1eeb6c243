"""Tests for TranslationCacheService."""

from app.models.translation_cache import TranslationCache
from app.services.translation_cache_service import TranslationCacheService, cache_key


def test_cache_key_depends_on_languages_and_text():
    assert cache_key("Hello", "en", "es") != cache_key("Hello", "en", "fr")
    assert cache_key("Hello", "en", "es") != cache_key("Hello!", "en", "es")
    assert len(cache_key("Hello", "en", "es")) == 64


def test_lookup_miss(db):
    assert TranslationCacheService(db).lookup("Hello", "en", "es") is None


def test_store_then_lookup_touches_last_used(db):
    svc = TranslationCacheService(db)
    svc.store("Hello", "en", "es", "Hola")
    entry = db.query(TranslationCache).one()
    first_used = entry.last_used
    assert svc.lookup("Hello", "en", "es") == "Hola"
    db.refresh(entry)
    assert entry.last_used >= first_used


def test_store_is_last_write_wins(db):
    svc = TranslationCacheService(db)
    svc.store("Hello", "en", "es", "Hola")
    svc.store("Hello", "en", "es", "¡Hola!")
    assert db.query(TranslationCache).count() == 1
    assert svc.lookup("Hello", "en", "es") == "¡Hola!"

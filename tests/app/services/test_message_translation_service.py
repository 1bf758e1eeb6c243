"""Tests for MessageTranslationService."""

from app.models.message_translation import MessageTranslation
from app.schemas.chat import TranslationCreate
from app.services.message_translation_service import MessageTranslationService


def _row(message, user_id, language, text):
    return TranslationCreate(
        message_id=message.id,
        user_id=user_id,
        target_language=language,
        translated_text=text,
    )


def test_create_translations_bulk(
    db, setup_direct_chat, make_message, setup_profile, setup_profile_es
):
    message = make_message(setup_direct_chat, setup_profile.id)
    created = MessageTranslationService(db).create_translations(
        [
            _row(message, setup_profile.id, "en", "Hello"),
            _row(message, setup_profile_es.id, "es", "Hola"),
        ]
    )
    assert len(created) == 2
    assert db.query(MessageTranslation).count() == 2


def test_create_translations_falls_back_to_row_by_row(
    db, setup_direct_chat, make_message, setup_profile, setup_profile_es
):
    message = make_message(setup_direct_chat, setup_profile.id)
    svc = MessageTranslationService(db)
    svc.create_translations([_row(message, setup_profile_es.id, "es", "Hola")])

    # The duplicate makes the bulk insert fail; the other row must still land
    created = svc.create_translations(
        [
            _row(message, setup_profile.id, "en", "Hello"),
            _row(message, setup_profile_es.id, "es", "Hola"),
        ]
    )
    assert [t.user_id for t in created] == [setup_profile.id]
    assert db.query(MessageTranslation).count() == 2


def test_create_translations_empty(db):
    assert MessageTranslationService(db).create_translations([]) == []


def test_get_translations_for_user(
    db, setup_direct_chat, make_message, setup_profile, setup_profile_es
):
    message = make_message(setup_direct_chat, setup_profile.id)
    svc = MessageTranslationService(db)
    svc.create_translations(
        [
            _row(message, setup_profile.id, "en", "Hello"),
            _row(message, setup_profile_es.id, "es", "Hola"),
        ]
    )
    mine = svc.get_translations_for_user([message.id], setup_profile_es.id)
    assert [t.translated_text for t in mine] == ["Hola"]
    assert svc.get_translations_for_user([], setup_profile_es.id) == []

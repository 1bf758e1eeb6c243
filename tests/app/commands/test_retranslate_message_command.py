"""Tests for RetranslateMessageCommand."""

from uuid import uuid4

import pytest

from app.auth.dependencies import Principal
from app.commands.retranslate_message_command import RetranslateMessageCommand
from app.constants.chat import ParticipantKind
from app.exceptions import Forbidden, NotFound
from app.models.message_translation import MessageTranslation


def _user(profile):
    return Principal(id=profile.id, kind=ParticipantKind.USER)


@pytest.mark.asyncio
async def test_fills_only_missing_rows(
    db, setup_direct_chat, setup_profile, setup_profile_es, make_message, fake_provider
):
    message = make_message(setup_direct_chat, setup_profile.id, text="Hello")
    db.add(
        MessageTranslation(
            message_id=message.id,
            user_id=setup_profile.id,
            target_language="en",
            translated_text="Hello",
        )
    )
    db.commit()

    result = await RetranslateMessageCommand(db, fake_provider).execute(
        message.id, _user(setup_profile)
    )

    assert [t.user_id for t in result.translations] == [setup_profile_es.id]
    assert fake_provider.calls == [("Hello", "en", "es")]
    assert db.query(MessageTranslation).count() == 2


@pytest.mark.asyncio
async def test_nothing_to_do_when_complete(
    db, setup_direct_chat, setup_profile, setup_profile_es, make_message, fake_provider
):
    message = make_message(setup_direct_chat, setup_profile.id, text="Hello")
    command = RetranslateMessageCommand(db, fake_provider)
    await command.execute(message.id, _user(setup_profile))
    fake_provider.calls.clear()

    result = await command.execute(message.id, _user(setup_profile))

    assert result.translations == []
    assert fake_provider.calls == []
    assert db.query(MessageTranslation).count() == 2


@pytest.mark.asyncio
async def test_unknown_or_deleted_message(
    db, setup_direct_chat, setup_profile, make_message, fake_provider
):
    with pytest.raises(NotFound):
        await RetranslateMessageCommand(db, fake_provider).execute(
            uuid4(), _user(setup_profile)
        )

    message = make_message(setup_direct_chat, setup_profile.id)
    message.is_deleted = True
    db.commit()
    with pytest.raises(NotFound):
        await RetranslateMessageCommand(db, fake_provider).execute(
            message.id, _user(setup_profile)
        )


@pytest.mark.asyncio
async def test_requires_participant(
    db, setup_direct_chat, setup_profile, make_message, fake_provider
):
    message = make_message(setup_direct_chat, setup_profile.id)
    outsider = Principal(id=uuid4(), kind=ParticipantKind.USER)
    with pytest.raises(Forbidden):
        await RetranslateMessageCommand(db, fake_provider).execute(message.id, outsider)

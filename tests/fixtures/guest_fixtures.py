"""Fixtures for invites, guest sessions and guest chats."""

from datetime import timedelta

import pytest

from app.commands.open_guest_chat import grant_for, open_guest_chat
from app.config import get_settings
from app.services.guest_invite_service import GuestInviteService
from app.utils.datetime_utils import utcnow


@pytest.fixture(scope="function")
def setup_invite(db, setup_profile):
    """Single-use invite from the English-speaking user, valid for 24h."""
    return GuestInviteService(db).create_invite(setup_profile.id, ttl_hours=24, max_uses=1)


@pytest.fixture(scope="function")
def setup_guest_chat(db, faker, setup_profile):
    """
    French-speaking guest seated opposite setup_profile.

    Returns the GuestChatGrant (chat_id, guest_session_id, guest_credential, ...).
    """
    expires_at = utcnow() + timedelta(hours=4)
    opened = open_guest_chat(
        db,
        inviter_id=setup_profile.id,
        display_name=faker.first_name(),
        preferred_language="fr",
        session_expires_at=expires_at,
        chat_delete_after=expires_at,
    )
    grant = grant_for(opened.chat.id, opened.guest, get_settings())
    db.commit()
    return grant

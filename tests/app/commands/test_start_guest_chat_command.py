"""Tests for StartGuestChatCommand and RotateQrSlugCommand."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.auth.dependencies import Principal
from app.commands.close_guest_chat_command import CloseGuestChatCommand
from app.commands.rotate_qr_slug_command import RotateQrSlugCommand
from app.commands.start_guest_chat_command import StartGuestChatCommand
from app.constants.chat import ParticipantKind
from app.core.slugs import SLUG_ALPHABET
from app.exceptions import (
    CredentialSigningUnavailable,
    InvalidInput,
    NotFound,
    RateLimited,
    SlugGenerationExhausted,
    SlugNotFound,
)
from app.models.chat import Chat
from app.models.guest import GuestSession
from app.models.qr_rate_limit import QrRateLimit
from app.services.chat_service import ChatService
from app.utils.datetime_utils import ensure_utc, utcnow

NOW = datetime(2026, 10, 19, 12, 30, 45, tzinfo=timezone.utc)


@pytest.fixture
def frozen_rate_limit_clock(monkeypatch):
    monkeypatch.setattr("app.services.qr_rate_limit_service.utcnow", lambda: NOW)


def test_start_creates_chat_with_slug_owner(db, make_profile):
    owner = make_profile("en", max_guest_hours=2)
    grant = StartGuestChatCommand(db).execute(owner.qr_slug, "Alex", "fr")

    assert set(ChatService(db).get_participant_ids(grant.chat_id)) == {
        owner.id,
        grant.guest_session_id,
    }
    chat = db.get(Chat, grant.chat_id)
    guest = db.get(GuestSession, grant.guest_session_id)
    assert chat.is_ephemeral is True
    assert chat.created_by == owner.id
    assert guest.invite_id is None
    assert ensure_utc(chat.delete_after) <= utcnow() + timedelta(hours=2)
    assert ensure_utc(chat.delete_after) > utcnow() + timedelta(hours=1, minutes=59)
    assert grant.reused is False


def test_start_unknown_slug(db, setup_profile):
    with pytest.raises(SlugNotFound) as exc_info:
        StartGuestChatCommand(db).execute("nope", "Alex", "fr")
    assert exc_info.value.status_code == 400


def test_start_missing_fields(db, setup_profile):
    with pytest.raises(InvalidInput):
        StartGuestChatCommand(db).execute(setup_profile.qr_slug, "  ", "fr")


def test_start_without_signing_secret(db, setup_profile, monkeypatch):
    monkeypatch.delenv("GUEST_CREDENTIAL_SECRET")
    with pytest.raises(CredentialSigningUnavailable):
        StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    assert db.query(Chat).count() == 0
    assert db.query(QrRateLimit).count() == 0


def test_start_rate_limited_per_inviter(
    db, setup_profile, monkeypatch, frozen_rate_limit_clock
):
    monkeypatch.setenv("QR_RATE_LIMIT_PER_MINUTE", "2")
    command = StartGuestChatCommand(db)
    command.execute(setup_profile.qr_slug, "Guest One", "fr")
    command.execute(setup_profile.qr_slug, "Guest Two", "de")

    with pytest.raises(RateLimited) as exc_info:
        StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Guest Three", "es")
    assert exc_info.value.retry_after == 15
    assert db.query(Chat).count() == 2


def test_rate_limit_is_per_inviter(
    db, make_profile, monkeypatch, frozen_rate_limit_clock
):
    monkeypatch.setenv("QR_RATE_LIMIT_PER_MINUTE", "1")
    first, second = make_profile("en"), make_profile("de")
    StartGuestChatCommand(db).execute(first.qr_slug, "Alex", "fr")
    StartGuestChatCommand(db).execute(second.qr_slug, "Alex", "fr")
    assert db.query(Chat).count() == 2


def test_reuse_returns_existing_chat(
    db, setup_profile, monkeypatch, frozen_rate_limit_clock
):
    monkeypatch.setenv("GUEST_CHAT_REUSE_ENABLED", "true")
    monkeypatch.setenv("QR_RATE_LIMIT_PER_MINUTE", "1")

    first = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    again = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")

    assert again.chat_id == first.chat_id
    assert again.guest_session_id == first.guest_session_id
    assert again.reused is True
    assert again.guest_credential

    # Reuse does not count against the quota, so a different guest is refused
    with pytest.raises(RateLimited):
        StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Sam", "fr")
    assert db.query(Chat).count() == 1


def test_reuse_disabled_creates_new_chat(db, setup_profile):
    first = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    again = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    assert again.chat_id != first.chat_id


def test_reuse_ignores_closed_chat(db, setup_profile, monkeypatch):
    monkeypatch.setenv("GUEST_CHAT_REUSE_ENABLED", "true")
    first = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    chat = db.get(Chat, first.chat_id)
    chat.delete_after = utcnow() - timedelta(minutes=1)
    db.commit()

    again = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    assert again.chat_id != first.chat_id
    assert again.reused is False


def test_rescan_after_close_starts_fresh_chat(db, setup_profile, monkeypatch):
    monkeypatch.setenv("GUEST_CHAT_REUSE_ENABLED", "true")
    first = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    guest = Principal(
        id=first.guest_session_id, kind=ParticipantKind.GUEST, chat_id=first.chat_id
    )
    closed = CloseGuestChatCommand(db).execute(first.chat_id, guest)
    # Still inside the grace period before the reaper runs
    assert ensure_utc(closed.delete_after) > utcnow()

    again = StartGuestChatCommand(db).execute(setup_profile.qr_slug, "Alex", "fr")
    assert again.chat_id != first.chat_id
    assert again.guest_session_id != first.guest_session_id
    assert again.reused is False


def test_rotate_slug_invalidates_old_slug(db, setup_profile):
    old_slug = setup_profile.qr_slug
    new_slug, url = RotateQrSlugCommand(db).execute(setup_profile.id)

    assert new_slug != old_slug
    assert len(new_slug) == 12
    assert set(new_slug) <= set(SLUG_ALPHABET)
    assert url == f"http://localhost:8080/join/{new_slug}"
    db.refresh(setup_profile)
    assert setup_profile.qr_rotated_at is not None

    with pytest.raises(SlugNotFound):
        StartGuestChatCommand(db).execute(old_slug, "Alex", "fr")
    grant = StartGuestChatCommand(db).execute(new_slug, "Alex", "fr")
    assert grant.chat_id


def test_rotate_unknown_profile(db):
    with pytest.raises(NotFound):
        RotateQrSlugCommand(db).execute(uuid4())


def test_rotate_gives_up_when_every_slug_is_taken(db, make_profile, monkeypatch):
    taken = make_profile("en")
    profile = make_profile("es")
    original_slug = profile.qr_slug
    monkeypatch.setattr(
        "app.commands.rotate_qr_slug_command.generate_slug",
        lambda length=12: taken.qr_slug,
    )

    with pytest.raises(SlugGenerationExhausted):
        RotateQrSlugCommand(db).execute(profile.id)
    db.refresh(profile)
    assert profile.qr_slug == original_slug

"""Command to start (or reuse) a guest chat from a profile's QR slug."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.commands.open_guest_chat import grant_for, open_guest_chat
from app.config import get_settings
from app.core.guest_credentials import require_signing_secret
from app.exceptions import InvalidInput, RateLimited, SlugNotFound
from app.models.profile import Profile
from app.schemas.guest import GuestChatGrant
from app.services.chat_service import ChatService
from app.services.guest_session_service import GuestSessionService
from app.services.qr_rate_limit_service import QrRateLimitService
from app.services.profile_service import ProfileService
from app.utils.datetime_utils import utcnow


class StartGuestChatCommand:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    def execute(
        self, slug: str, display_name: str, preferred_language: str
    ) -> GuestChatGrant:
        """
        Resolve the slug to its current owner and seat the guest in a new
        ephemeral chat. Only new chats count against the owner's per-minute
        quota; a reused chat does not.
        """
        slug = (slug or "").strip()
        display_name = (display_name or "").strip()
        preferred_language = (preferred_language or "").strip()
        if not slug or not display_name or not preferred_language:
            raise InvalidInput("Missing required fields: slug, name, preferredLanguage")

        inviter = ProfileService(self.db).get_profile_by_qr_slug(slug)
        if inviter is None:
            raise SlugNotFound()
        require_signing_secret(self.settings)

        if self.settings.guest_chat_reuse_enabled:
            grant = self._reuse_existing(inviter, display_name, preferred_language)
            if grant is not None:
                return grant

        allowed, retry_after = QrRateLimitService(self.db).hit(
            inviter.id, self.settings.qr_rate_limit_per_minute
        )
        if not allowed:
            self.logger.warning(
                "QR start rate limited for inviter %s (retry in %ss)",
                inviter.id,
                retry_after,
            )
            raise RateLimited(
                "Too many guest chats started, try again shortly",
                retry_after=retry_after,
            )

        now = utcnow()
        expires_at = now + timedelta(hours=inviter.max_guest_hours)
        try:
            opened = open_guest_chat(
                self.db,
                inviter_id=inviter.id,
                display_name=display_name,
                preferred_language=preferred_language,
                session_expires_at=expires_at,
                chat_delete_after=expires_at,
                chat_name=f"{display_name} ↔ Invite",
            )
            grant = grant_for(opened.chat.id, opened.guest, self.settings)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.logger.info(
            "Guest %s started chat %s with %s via QR",
            opened.guest.id,
            opened.chat.id,
            inviter.id,
        )
        return grant

    def _reuse_existing(
        self, inviter: Profile, display_name: str, preferred_language: str
    ) -> Optional[GuestChatGrant]:
        """
        Best-effort: a concurrent start may still create a second chat, which
        is harmless.
        """
        now = utcnow()
        chat_service = ChatService(self.db)
        guest_service = GuestSessionService(self.db)
        for chat in chat_service.find_reusable_guest_chat(inviter.id, now=now):
            other_ids = [
                pid for pid in chat_service.get_participant_ids(chat.id) if pid != inviter.id
            ]
            if len(other_ids) != 1:
                continue
            guest = guest_service.get_guest_session(other_ids[0])
            if (
                guest is None
                or guest_service.is_expired(guest, now=now)
                or guest.display_name != display_name
                or guest.preferred_language != preferred_language
            ):
                continue
            guest_service.touch(guest)
            self.logger.info("Reusing chat %s for guest %s", chat.id, guest.id)
            return grant_for(chat.id, guest, self.settings, reused=True)
        return None

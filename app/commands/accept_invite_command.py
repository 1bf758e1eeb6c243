"""Commands that turn an invite token into a guest session and an ephemeral chat."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.commands.open_guest_chat import grant_for, open_guest_chat
from app.config import get_settings
from app.constants.chat import DEFAULT_GUEST_DISPLAY_NAME
from app.core.guest_credentials import require_signing_secret
from app.exceptions import InvalidInput
from app.schemas.guest import GuestChatGrant
from app.services.guest_invite_service import GuestInviteService
from app.utils.datetime_utils import utcnow

MIN_TOKEN_LENGTH = 10
MAX_TOKEN_LENGTH = 100
MAX_DISPLAY_NAME_LENGTH = 100


class AcceptInviteCommand:
    """
    Consume one use of an invite and seat the guest opposite the inviter.

    The used_count increment, guest session, chat and participants commit
    together; any failure before the commit leaves the invite unconsumed.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    def execute(
        self,
        token: str,
        display_name: str,
        preferred_language: str,
        session_ttl_hours: Optional[int] = None,
        chat_ttl_hours: Optional[int] = None,
        link_guest_session: bool = False,
    ) -> GuestChatGrant:
        token = (token or "").strip()
        display_name = (display_name or "").strip()
        preferred_language = (preferred_language or "").strip()
        if not token or not display_name or not preferred_language:
            raise InvalidInput("Missing required fields: token, name, preferredLanguage")

        # Refuse before consuming anything if credentials cannot be minted
        require_signing_secret(self.settings)

        now = utcnow()
        try:
            invite = GuestInviteService(self.db).consume(token, now=now)
            opened = open_guest_chat(
                self.db,
                inviter_id=invite.inviter_id,
                display_name=display_name,
                preferred_language=preferred_language,
                session_expires_at=now
                + timedelta(
                    hours=session_ttl_hours or self.settings.guest_session_ttl_hours
                ),
                chat_delete_after=now
                + timedelta(hours=chat_ttl_hours or self.settings.guest_chat_ttl_hours),
                invite_id=invite.id,
                chat_name=f"{display_name} ↔ Invite",
                link_guest_session=link_guest_session,
            )
            grant = grant_for(opened.chat.id, opened.guest, self.settings)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.logger.info(
            "Invite %s accepted: guest %s joined chat %s (use %s of %s)",
            invite.id,
            opened.guest.id,
            opened.chat.id,
            invite.used_count,
            invite.max_uses,
        )
        return grant


class AcceptInviteFromTokenCommand:
    """Share-link flow: optional display name, default language, 24h session and chat."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()

    def execute(
        self,
        token: Optional[str],
        display_name: Optional[str] = None,
        preferred_language: Optional[str] = None,
    ) -> GuestChatGrant:
        if not token or not isinstance(token, str):
            raise InvalidInput("Token is required and must be a string")
        if len(token) < MIN_TOKEN_LENGTH or len(token) > MAX_TOKEN_LENGTH:
            raise InvalidInput("Token format is invalid")
        if display_name is not None and len(display_name) > MAX_DISPLAY_NAME_LENGTH:
            raise InvalidInput("Display name must be less than 100 characters")

        ttl = self.settings.guest_session_ttl_hours
        return AcceptInviteCommand(self.db).execute(
            token=token,
            display_name=(display_name or "").strip() or DEFAULT_GUEST_DISPLAY_NAME,
            preferred_language=preferred_language or self.settings.default_language,
            session_ttl_hours=ttl,
            chat_ttl_hours=ttl,
            link_guest_session=True,
        )

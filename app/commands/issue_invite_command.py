"""Commands to issue invite tokens (single invites and multi-use share links)."""

from __future__ import annotations

import logging
import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import get_settings
from app.exceptions import InvalidInput
from app.models.guest import GuestInvite
from app.services.guest_invite_service import GuestInviteService
from app.services.profile_service import ProfileService


def invite_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/guest/{token}"


class IssueInviteCommand:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    def execute(
        self,
        inviter_id: UUID,
        ttl_hours: Optional[int] = None,
        max_uses: Optional[int] = None,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
    ) -> tuple[GuestInvite, str]:
        """
        Create a GuestInvite for an existing profile.

        Returns:
            (invite, invite_url)
        """
        if ProfileService(self.db).get_profile(inviter_id) is None:
            raise InvalidInput("Unknown inviterId")
        invite = GuestInviteService(self.db).create_invite(
            inviter_id=inviter_id,
            ttl_hours=ttl_hours or self.settings.invite_default_ttl_hours,
            max_uses=max_uses or self.settings.invite_default_max_uses,
            token=token,
        )
        self.logger.info(
            "Issued invite %s for inviter %s (max_uses=%s, expires_at=%s)",
            invite.id,
            inviter_id,
            invite.max_uses,
            invite.expires_at,
        )
        return invite, invite_url(base_url or self.settings.public_app_url, invite.token)


class GenerateShareLinkCommand:
    """A share link is a multi-use invite with the share-link TTL and use limit."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()

    def execute(self, user_id: UUID) -> tuple[GuestInvite, str]:
        return IssueInviteCommand(self.db).execute(
            inviter_id=user_id,
            ttl_hours=self.settings.share_link_ttl_hours,
            max_uses=self.settings.share_link_max_uses,
            token=str(uuid.uuid4()),
        )

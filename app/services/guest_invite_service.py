"""GuestInvite issuance and the conditional used_count increment."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import InviteExhausted, InviteExpired, InviteNotFound
from app.models.guest import GuestInvite
from app.utils.datetime_utils import ensure_utc, utcnow

# 18 random bytes -> 24 url-safe characters
INVITE_TOKEN_BYTES = 18


def generate_invite_token() -> str:
    return secrets.token_urlsafe(INVITE_TOKEN_BYTES)


class GuestInviteService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_invite_by_token(self, token: str) -> Optional[GuestInvite]:
        return self.db.query(GuestInvite).filter(GuestInvite.token == token).first()

    def create_invite(
        self,
        inviter_id: UUID,
        ttl_hours: int,
        max_uses: int,
        token: Optional[str] = None,
    ) -> GuestInvite:
        invite = GuestInvite(
            inviter_id=inviter_id,
            token=token or generate_invite_token(),
            expires_at=utcnow() + timedelta(hours=ttl_hours),
            max_uses=max_uses,
            used_count=0,
        )
        self.db.add(invite)
        self.db.commit()
        self.db.refresh(invite)
        return invite

    def consume(self, token: str, now: Optional[datetime] = None) -> GuestInvite:
        """
        Claim one use of the invite with a single conditional UPDATE, so concurrent
        accepts can never push used_count past max_uses. Does not commit: the
        caller commits together with the rows it creates for the guest.

        Raises InviteNotFound / InviteExpired / InviteExhausted when no row was claimed.
        """
        now = now or utcnow()
        claimed = (
            self.db.query(GuestInvite)
            .filter(
                GuestInvite.token == token,
                GuestInvite.expires_at > now,
                GuestInvite.used_count < GuestInvite.max_uses,
            )
            .update(
                {GuestInvite.used_count: GuestInvite.used_count + 1},
                synchronize_session=False,
            )
        )
        invite = self.get_invite_by_token(token)
        if claimed == 1 and invite is not None:
            self.db.refresh(invite)
            return invite
        if invite is None:
            raise InviteNotFound()
        if ensure_utc(invite.expires_at) <= now:
            raise InviteExpired()
        raise InviteExhausted()

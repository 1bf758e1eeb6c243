"""GuestInvite and GuestSession models."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
)

from app.db import Base
from app.models.mixins import CreatedAtMixin
from app.utils.datetime_utils import utcnow


class GuestInvite(Base, CreatedAtMixin):
    """Opaque invite token. used_count only moves through a conditional increment."""

    __tablename__ = "guest_invites"

    __table_args__ = (
        CheckConstraint("used_count <= max_uses", name="ck_guest_invites_used_le_max"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    token = Column(String(128), unique=True, nullable=False, index=True)
    inviter_id = Column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
    max_uses = Column(Integer, nullable=False, default=1)
    used_count = Column(Integer, nullable=False, default=0)


class GuestSession(Base, CreatedAtMixin):
    """Stand-in profile for a non-registered participant. Its id is used as sender_id/user_id."""

    __tablename__ = "guest_sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    display_name = Column(String(100), nullable=False)
    preferred_language = Column(String(16), nullable=False, default="en")
    invite_id = Column(
        Uuid,
        ForeignKey("guest_invites.id", ondelete="SET NULL"),
        nullable=True,
    )  # None for the QR-slug flow
    expires_at = Column(DateTime(timezone=True), nullable=False)
    last_active_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

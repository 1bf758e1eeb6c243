"""Profile model: a registered user's chat identity and QR entry point."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class Profile(Base, TimestampMixin):
    """
    Registered user. qr_slug is the standing "start a guest chat with me" slug;
    rotating it invalidates every previously distributed QR image at once.
    """

    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    preferred_language = Column(String(16), nullable=False, default="en")
    qr_slug = Column(String(64), unique=True, nullable=True, index=True)
    qr_rotated_at = Column(DateTime(timezone=True), nullable=True)
    max_guest_hours = Column(Integer, nullable=False, default=4)

"""QrRateLimit model: per-inviter, per-minute counter for slug-started guest chats."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, Uuid

from app.db import Base


class QrRateLimit(Base):
    __tablename__ = "qr_rate_limits"

    inviter_id = Column(Uuid, primary_key=True)
    minute_bucket = Column(DateTime(timezone=True), primary_key=True)
    count = Column(Integer, nullable=False, default=0)

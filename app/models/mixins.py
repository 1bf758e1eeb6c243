"""Reusable column mixins."""

from __future__ import annotations

from sqlalchemy import Column, DateTime

from app.utils.datetime_utils import utcnow


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class CreatedAtMixin:
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

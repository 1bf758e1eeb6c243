"""Durable per-inviter, per-minute counter for new guest chats started from a QR slug."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.qr_rate_limit import QrRateLimit
from app.utils.datetime_utils import ensure_utc, minute_bucket, utcnow


class QrRateLimitService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def hit(
        self,
        inviter_id: UUID,
        limit_per_minute: int,
        now: Optional[datetime] = None,
    ) -> Tuple[bool, int]:
        """
        Count one new-chat start for (inviter, current minute) if under the quota.

        Returns (allowed, retry_after_seconds). The increment is a single conditional
        UPDATE; a missing bucket row is inserted with count=1.
        """
        now = ensure_utc(now or utcnow())
        bucket = minute_bucket(now)
        retry_after = max(1, int((bucket + timedelta(minutes=1) - now).total_seconds()))

        for _ in range(2):
            updated = (
                self.db.query(QrRateLimit)
                .filter(
                    QrRateLimit.inviter_id == inviter_id,
                    QrRateLimit.minute_bucket == bucket,
                    QrRateLimit.count < limit_per_minute,
                )
                .update(
                    {QrRateLimit.count: QrRateLimit.count + 1},
                    synchronize_session=False,
                )
            )
            if updated == 1:
                self.db.commit()
                return True, 0
            exists = (
                self.db.query(QrRateLimit.count)
                .filter(
                    QrRateLimit.inviter_id == inviter_id,
                    QrRateLimit.minute_bucket == bucket,
                )
                .first()
            )
            if exists is not None:
                self.db.rollback()
                return False, retry_after
            if limit_per_minute <= 0:
                return False, retry_after
            self.db.add(QrRateLimit(inviter_id=inviter_id, minute_bucket=bucket, count=1))
            try:
                self.db.commit()
                return True, 0
            except IntegrityError:
                # Concurrent first hit in this bucket; retry as an update
                self.db.rollback()
        return False, retry_after

    def purge_older_than(self, cutoff: datetime) -> int:
        deleted = (
            self.db.query(QrRateLimit)
            .filter(QrRateLimit.minute_bucket < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

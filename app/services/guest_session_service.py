"""GuestSession CRUD."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.guest import GuestSession
from app.utils.datetime_utils import ensure_utc, utcnow


class GuestSessionService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_guest_session(self, session_id: UUID) -> Optional[GuestSession]:
        return self.db.query(GuestSession).filter(GuestSession.id == session_id).first()

    def get_guest_sessions_by_ids(self, session_ids: Iterable[UUID]) -> List[GuestSession]:
        ids = list(session_ids)
        if not ids:
            return []
        return self.db.query(GuestSession).filter(GuestSession.id.in_(ids)).all()

    def create_guest_session(
        self,
        display_name: str,
        preferred_language: str,
        expires_at: datetime,
        invite_id: Optional[UUID] = None,
        commit: bool = True,
    ) -> GuestSession:
        guest = GuestSession(
            display_name=display_name,
            preferred_language=preferred_language,
            expires_at=expires_at,
            invite_id=invite_id,
        )
        self.db.add(guest)
        if commit:
            self.db.commit()
            self.db.refresh(guest)
        else:
            self.db.flush()
        return guest

    def touch(self, guest: GuestSession) -> None:
        guest.last_active_at = utcnow()
        self.db.commit()

    @staticmethod
    def is_expired(guest: GuestSession, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return ensure_utc(guest.expires_at) <= now

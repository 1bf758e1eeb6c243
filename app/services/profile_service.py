"""Profile lookups and QR slug updates."""

from __future__ import annotations

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.utils.datetime_utils import utcnow


class ProfileService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_profile(self, profile_id: UUID) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.id == profile_id).first()

    def get_profiles_by_ids(self, profile_ids: Iterable[UUID]) -> List[Profile]:
        ids = list(profile_ids)
        if not ids:
            return []
        return self.db.query(Profile).filter(Profile.id.in_(ids)).all()

    def get_profile_by_qr_slug(self, slug: str) -> Optional[Profile]:
        """Only the current slug matches; rotated-away slugs are simply gone."""
        return self.db.query(Profile).filter(Profile.qr_slug == slug).first()

    def qr_slug_exists(self, slug: str) -> bool:
        return (
            self.db.query(Profile.id).filter(Profile.qr_slug == slug).first()
            is not None
        )

    def set_qr_slug(self, profile: Profile, slug: str) -> Profile:
        """Replace slug and rotation timestamp in one commit. Raises IntegrityError on collision."""
        profile.qr_slug = slug
        profile.qr_rotated_at = utcnow()
        self.db.commit()
        self.db.refresh(profile)
        return profile

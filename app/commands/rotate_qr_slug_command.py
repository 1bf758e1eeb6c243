"""Command to replace a profile's QR slug, invalidating the old one immediately."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.slugs import generate_slug, join_url
from app.exceptions import NotFound, SlugGenerationExhausted
from app.services.profile_service import ProfileService


class RotateQrSlugCommand:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    def execute(self, user_id: UUID) -> tuple[str, str]:
        """
        Returns:
            (new_slug, join_url)
        """
        profiles = ProfileService(self.db)
        profile = profiles.get_profile(user_id)
        if profile is None:
            raise NotFound("Profile not found")

        for attempt in range(1, self.settings.qr_slug_max_attempts + 1):
            slug = generate_slug(self.settings.qr_slug_length)
            if profiles.qr_slug_exists(slug):
                continue
            try:
                profiles.set_qr_slug(profile, slug)
            except IntegrityError:
                # Lost a race for the same slug; try another
                self.db.rollback()
                profile = profiles.get_profile(user_id)
                continue
            self.logger.info(
                "Rotated QR slug for %s on attempt %d", user_id, attempt
            )
            return slug, join_url(self.settings.public_app_url, slug)

        self.logger.error(
            "QR slug rotation for %s gave up after %d attempts",
            user_id,
            self.settings.qr_slug_max_attempts,
        )
        raise SlugGenerationExhausted()

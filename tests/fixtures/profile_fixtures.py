"""Fixtures for profile model."""

import pytest

from app.core.slugs import generate_slug
from app.models.profile import Profile


@pytest.fixture
def make_profile(db, faker):
    def _make(preferred_language="en", **kwargs):
        profile = Profile(
            name=kwargs.pop("name", faker.name()),
            preferred_language=preferred_language,
            qr_slug=kwargs.pop("qr_slug", generate_slug()),
            **kwargs,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture(scope="function")
def setup_profile(make_profile):
    """English-speaking registered user."""
    return make_profile("en")


@pytest.fixture(scope="function")
def setup_profile_es(make_profile):
    """Spanish-speaking registered user."""
    return make_profile("es")

"""QR slug generation."""

from __future__ import annotations

import secrets

# No 0/O, 1/l/I: slugs get typed by hand from printed codes
SLUG_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnpqrstuvwxyz"


def generate_slug(length: int = 12) -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


def join_url(public_app_url: str, slug: str) -> str:
    return f"{public_app_url.rstrip('/')}/join/{slug}"

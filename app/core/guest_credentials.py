"""
Guest credentials: short-lived HS256 tokens binding a guest session to one chat.

Signed with a dedicated secret; when it is not configured, minting and
verification both fail closed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

from jose import JWTError, jwt

from app.config import Settings, get_settings
from app.constants.chat import GUEST_CREDENTIAL_AUDIENCE
from app.exceptions import CredentialSigningUnavailable, Unauthorized
from app.schemas.guest import GuestCredentialClaims
from app.utils.datetime_utils import utcnow

ALGORITHM = "HS256"


def require_signing_secret(settings: Settings) -> str:
    if not settings.guest_credential_secret:
        raise CredentialSigningUnavailable()
    return settings.guest_credential_secret


def mint_guest_credential(
    guest_session_id: UUID,
    chat_id: UUID,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> Tuple[str, datetime]:
    """Return (token, expires_at). Lifetime never exceeds the configured hard cap."""
    settings = settings or get_settings()
    secret = require_signing_secret(settings)
    issued_at = now or utcnow()
    expires_at = issued_at + timedelta(
        minutes=settings.effective_guest_credential_ttl_minutes
    )
    payload = {
        "sub": str(guest_session_id),
        "guest_session_id": str(guest_session_id),
        "chat_id": str(chat_id),
        "aud": GUEST_CREDENTIAL_AUDIENCE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM), expires_at


def verify_guest_credential(
    token: str, settings: Optional[Settings] = None
) -> GuestCredentialClaims:
    """Decode and validate a guest credential. Raises Unauthorized on any defect."""
    settings = settings or get_settings()
    secret = require_signing_secret(settings)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            audience=GUEST_CREDENTIAL_AUDIENCE,
        )
        return GuestCredentialClaims(
            guest_session_id=UUID(payload["guest_session_id"]),
            chat_id=UUID(payload["chat_id"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, ValueError, TypeError) as e:
        raise Unauthorized("Invalid guest credential") from e

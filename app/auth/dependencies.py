"""
Request principals.

Registered users present a bearer JWT whose subject is their profile id.
Guests present a guest credential, which is bound to exactly one chat.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.chat import ParticipantKind
from app.core.guest_credentials import verify_guest_credential
from app.db import get_db
from app.exceptions import DependencyFailure, Unauthorized
from app.models.profile import Profile
from app.services.profile_service import ProfileService

ALGORITHM = "HS256"

_security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    id: UUID
    kind: ParticipantKind
    chat_id: Optional[UUID] = None  # set for guests only

    @property
    def is_guest(self) -> bool:
        return self.kind == ParticipantKind.GUEST


def decode_user_token(token: str) -> UUID:
    settings = get_settings()
    if not settings.auth_jwt_secret:
        raise DependencyFailure("Authentication is not configured")
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.auth_jwt_audience,
        )
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError, TypeError) as e:
        raise Unauthorized("Invalid token") from e


def resolve_token(token: str) -> Principal:
    """Accept either a user token or a guest credential."""
    try:
        return Principal(id=decode_user_token(token), kind=ParticipantKind.USER)
    except (Unauthorized, DependencyFailure):
        if not get_settings().guest_credential_secret:
            # Guest credentials are switched off, so the user-token error stands
            raise
        claims = verify_guest_credential(token)
        return Principal(
            id=claims.guest_session_id,
            kind=ParticipantKind.GUEST,
            chat_id=claims.chat_id,
        )


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_db),
) -> Profile:
    """Registered user behind the bearer token. Guest credentials are rejected."""
    if creds is None or creds.scheme.lower() != "bearer":
        raise Unauthorized("Not authenticated")
    profile = ProfileService(db).get_profile(decode_user_token(creds.credentials))
    if profile is None:
        raise Unauthorized("User not found")
    return profile


def get_chat_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_security),
) -> Principal:
    if creds is None or creds.scheme.lower() != "bearer":
        raise Unauthorized("Not authenticated")
    return resolve_token(creds.credentials)

"""Pydantic schemas for invites, guest sessions, QR slugs and ephemeral chat lifecycle."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.chat import CamelModel

# -----------------------------------------------------------------------------
# Invite issuance
# -----------------------------------------------------------------------------


class IssueInviteRequest(CamelModel):
    inviter_id: UUID
    ttl_hours: Optional[int] = Field(default=None, ge=1, le=24 * 30)
    max_uses: Optional[int] = Field(default=None, ge=1, le=1000)
    base_url: Optional[str] = Field(default=None, max_length=512)


class IssueInviteResponse(CamelModel):
    invite_url: str
    token: str
    expires_at: datetime


class ShareLinkResponse(CamelModel):
    share_url: str
    token: str
    expires_at: datetime
    max_uses: int


# -----------------------------------------------------------------------------
# Guest chat start (invite token, QR slug)
# -----------------------------------------------------------------------------


class GuestInfo(CamelModel):
    id: UUID
    name: str
    lang: str


class AcceptInviteRequest(CamelModel):
    token: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    preferred_language: str = Field(..., min_length=1, max_length=16)
    base_url: Optional[str] = Field(default=None, max_length=512)


class StartGuestChatRequest(CamelModel):
    slug: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    preferred_language: str = Field(..., min_length=1, max_length=16)


class GuestChatResponse(CamelModel):
    chat_id: UUID
    guest_credential: str
    guest_info: GuestInfo
    url: Optional[str] = None


class GuestChatGrant(BaseModel):
    """What a successful guest start produces, before it is shaped for a given endpoint."""

    chat_id: UUID
    guest_session_id: UUID
    display_name: str
    preferred_language: str
    guest_credential: str
    credential_expires_at: datetime
    reused: bool = False


class TokenGuestSessionRequest(BaseModel):
    """Alt flow body: snake_case on the wire."""

    token: Optional[str] = None
    display_name: Optional[str] = None
    preferred_language: Optional[str] = Field(default=None, max_length=16)


class TokenGuestSessionResponse(BaseModel):
    conversation_id: UUID
    guest_id: UUID
    guest_jwt: str


# -----------------------------------------------------------------------------
# QR slug, close, sweep
# -----------------------------------------------------------------------------


class RotateSlugResponse(CamelModel):
    new_slug: str
    join_url: str


class CloseGuestChatRequest(CamelModel):
    chat_id: UUID
    minutes_until_delete: Optional[int] = Field(default=None, ge=0, le=60 * 24 * 7)


class CloseGuestChatResponse(CamelModel):
    ok: bool = True
    delete_after: datetime


class SweepResponse(CamelModel):
    deleted_count: int
    failed_count: int = 0


class GuestCredentialClaims(BaseModel):
    """Verified claims of a guest credential."""

    guest_session_id: UUID
    chat_id: UUID
    expires_at: datetime

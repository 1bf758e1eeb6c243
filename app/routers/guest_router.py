"""Guest lifecycle API: invites, share links, guest chat start and close."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from redis import Redis
from sqlalchemy.orm import Session

from app.auth.dependencies import Principal, get_chat_principal, get_current_user
from app.commands.accept_invite_command import (
    AcceptInviteCommand,
    AcceptInviteFromTokenCommand,
)
from app.commands.close_guest_chat_command import CloseGuestChatCommand
from app.commands.issue_invite_command import (
    GenerateShareLinkCommand,
    IssueInviteCommand,
)
from app.commands.start_guest_chat_command import StartGuestChatCommand
from app.config import get_settings
from app.db import get_db
from app.exceptions import NotFoundOrExpired, RateLimited
from app.infra.redis_client import get_redis_client
from app.models.profile import Profile
from app.schemas.guest import (
    AcceptInviteRequest,
    CloseGuestChatRequest,
    CloseGuestChatResponse,
    GuestChatGrant,
    GuestChatResponse,
    GuestInfo,
    IssueInviteRequest,
    IssueInviteResponse,
    ShareLinkResponse,
    StartGuestChatRequest,
    TokenGuestSessionRequest,
    TokenGuestSessionResponse,
)
from app.utils.rate_limit import check_rate_limit, client_ip

guest_router = APIRouter(tags=["Guest"])


def _guest_chat_response(grant: GuestChatGrant, url: str | None = None) -> GuestChatResponse:
    return GuestChatResponse(
        chat_id=grant.chat_id,
        guest_credential=grant.guest_credential,
        guest_info=GuestInfo(
            id=grant.guest_session_id,
            name=grant.display_name,
            lang=grant.preferred_language,
        ),
        url=url,
    )


@guest_router.post("/invites", response_model=IssueInviteResponse)
def issue_invite(
    data: IssueInviteRequest,
    db: Session = Depends(get_db),
) -> IssueInviteResponse:
    """Create a one-shot (or N-use) invite token for an inviter."""
    invite, url = IssueInviteCommand(db).execute(
        inviter_id=data.inviter_id,
        ttl_hours=data.ttl_hours,
        max_uses=data.max_uses,
        base_url=data.base_url,
    )
    return IssueInviteResponse(invite_url=url, token=invite.token, expires_at=invite.expires_at)


@guest_router.post("/invites/accept", response_model=GuestChatResponse)
def accept_invite(
    data: AcceptInviteRequest,
    db: Session = Depends(get_db),
) -> GuestChatResponse:
    """Accept an invite: new guest session, new ephemeral chat, chat-scoped credential."""
    try:
        grant = AcceptInviteCommand(db).execute(
            token=data.token,
            display_name=data.name,
            preferred_language=data.preferred_language,
        )
    except NotFoundOrExpired as e:
        # This endpoint reports every unusable invite as a bad request
        raise NotFoundOrExpired(e.message, status_code=400) from e
    base = (data.base_url or get_settings().public_app_url).rstrip("/")
    return _guest_chat_response(grant, url=f"{base}/chat/{grant.chat_id}")


@guest_router.post("/guest-sessions", response_model=TokenGuestSessionResponse)
def accept_invite_from_token(
    data: TokenGuestSessionRequest,
    request: Request,
    db: Session = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
) -> TokenGuestSessionResponse:
    """Share-link flow with snake_case fields and a per-client-IP rate limit."""
    ip = client_ip(
        request.headers.get("x-forwarded-for"),
        request.headers.get("x-real-ip"),
        request.client.host if request.client else None,
    )
    allowed, retry_after = check_rate_limit(
        "guest-sessions",
        ip,
        redis_client,
        get_settings().guest_token_rate_limit_per_minute,
    )
    if not allowed:
        raise RateLimited(
            "Rate limit exceeded. Try again shortly.", retry_after=retry_after
        )
    grant = AcceptInviteFromTokenCommand(db).execute(
        token=data.token,
        display_name=data.display_name,
        preferred_language=data.preferred_language,
    )
    return TokenGuestSessionResponse(
        conversation_id=grant.chat_id,
        guest_id=grant.guest_session_id,
        guest_jwt=grant.guest_credential,
    )


@guest_router.post("/guest-chats", response_model=GuestChatResponse)
def start_guest_chat(
    data: StartGuestChatRequest,
    db: Session = Depends(get_db),
) -> GuestChatResponse:
    """Start a guest chat from a profile's QR slug."""
    grant = StartGuestChatCommand(db).execute(
        slug=data.slug,
        display_name=data.name,
        preferred_language=data.preferred_language,
    )
    return _guest_chat_response(grant)


@guest_router.post("/guest-chats/close", response_model=CloseGuestChatResponse)
def close_guest_chat(
    data: CloseGuestChatRequest,
    principal: Principal = Depends(get_chat_principal),
    db: Session = Depends(get_db),
) -> CloseGuestChatResponse:
    chat = CloseGuestChatCommand(db).execute(
        data.chat_id, principal, minutes_until_delete=data.minutes_until_delete
    )
    return CloseGuestChatResponse(ok=True, delete_after=chat.delete_after)


@guest_router.post("/share-links", response_model=ShareLinkResponse)
def generate_share_link(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ShareLinkResponse:
    invite, url = GenerateShareLinkCommand(db).execute(current_user.id)
    return ShareLinkResponse(
        share_url=url,
        token=invite.token,
        expires_at=invite.expires_at,
        max_uses=invite.max_uses,
    )

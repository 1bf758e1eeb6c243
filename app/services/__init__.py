from app.services.chat_service import ChatService
from app.services.guest_invite_service import GuestInviteService
from app.services.guest_session_service import GuestSessionService
from app.services.message_service import MessageService
from app.services.message_translation_service import MessageTranslationService
from app.services.participant_resolver import ParticipantResolver
from app.services.profile_service import ProfileService
from app.services.qr_rate_limit_service import QrRateLimitService
from app.services.translation_cache_service import TranslationCacheService

__all__ = [
    "ChatService",
    "GuestInviteService",
    "GuestSessionService",
    "MessageService",
    "MessageTranslationService",
    "ParticipantResolver",
    "ProfileService",
    "QrRateLimitService",
    "TranslationCacheService",
]

from app.models.chat import Chat, ChatParticipant
from app.models.guest import GuestInvite, GuestSession
from app.models.message import Message, MessageReaction, MessageReadReceipt
from app.models.message_translation import MessageTranslation
from app.models.profile import Profile
from app.models.qr_rate_limit import QrRateLimit
from app.models.translation_cache import TranslationCache

__all__ = [
    "Chat",
    "ChatParticipant",
    "GuestInvite",
    "GuestSession",
    "Message",
    "MessageReaction",
    "MessageReadReceipt",
    "MessageTranslation",
    "Profile",
    "QrRateLimit",
    "TranslationCache",
]

"""Enumerations shared by chat models, schemas and services."""

from enum import StrEnum


class ChatType(StrEnum):
    DIRECT = "direct"
    GROUP = "group"


class SenderType(StrEnum):
    USER = "user"
    GUEST = "guest"


class ParticipantKind(StrEnum):
    """Whether a participant id resolves to a registered profile or a guest session."""

    USER = "user"
    GUEST = "guest"


class ChangeTable(StrEnum):
    MESSAGES = "messages"
    MESSAGE_TRANSLATIONS = "message_translations"


AUTO_LANGUAGE = "auto"
DEFAULT_GUEST_DISPLAY_NAME = "Guest"
GUEST_CREDENTIAL_AUDIENCE = "guest"

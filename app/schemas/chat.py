"""Pydantic schemas for messages, translations and chat participants."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.constants.chat import ParticipantKind

# -----------------------------------------------------------------------------
# Entity records (ORM row -> typed record; model_validate fails on shape mismatch)
# -----------------------------------------------------------------------------


class MessageRead(BaseModel):
    """Message row as delivered to clients and the realtime relay."""

    id: UUID
    chat_id: UUID
    sender_id: UUID
    sender_type: str
    original_text: str
    source_language: str
    attachment_url: Optional[str] = None
    attachment_type: Optional[str] = None
    reply_to_id: Optional[UUID] = None
    created_at: datetime
    is_deleted: bool = False

    model_config = {"from_attributes": True}


class TranslationRead(BaseModel):
    """MessageTranslation row."""

    id: UUID
    message_id: UUID
    user_id: UUID
    target_language: str
    translated_text: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatRead(BaseModel):
    id: UUID
    type: str
    name: Optional[str] = None
    created_by: Optional[UUID] = None
    is_ephemeral: bool
    delete_after: Optional[datetime] = None
    guest_session_id: Optional[UUID] = None
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ResolvedParticipant(BaseModel):
    """A chat member with the language their translations are rendered in."""

    id: UUID
    target_language: str
    kind: ParticipantKind

    model_config = ConfigDict(frozen=True)


class TranslationCreate(BaseModel):
    message_id: UUID
    user_id: UUID
    target_language: str
    translated_text: str


# -----------------------------------------------------------------------------
# Request / response bodies (camelCase on the wire)
# -----------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessageRequest(CamelModel):
    chat_id: UUID
    message: Optional[str] = Field(default=None, max_length=20000)
    source_language: Optional[str] = Field(default=None, max_length=16)
    reply_to_id: Optional[UUID] = None
    attachment_url: Optional[str] = Field(default=None, max_length=1024)
    attachment_type: Optional[str] = Field(default=None, max_length=128)


class SendMessageResponse(CamelModel):
    success: bool = True
    message_id: UUID


class SendGuestMessageRequest(CamelModel):
    chat_id: UUID
    message: Optional[str] = Field(default=None, max_length=20000)
    guest_credential: str = Field(..., min_length=1)
    reply_to_id: Optional[UUID] = None
    attachment_url: Optional[str] = Field(default=None, max_length=1024)
    attachment_type: Optional[str] = Field(default=None, max_length=128)


class SendGuestMessageResponse(CamelModel):
    message_id: UUID
    created_at: datetime


class RetranslateResponse(CamelModel):
    message_id: UUID
    created: int
    failed_languages: list[str] = Field(default_factory=list)


class ChatMessageRow(CamelModel):
    """Message enriched for display: sender name and the caller's translation, if any."""

    id: UUID
    chat_id: UUID
    sender_id: UUID
    sender_type: str
    sender_name: str
    original_text: str
    source_language: str
    translated_text: Optional[str] = None
    attachment_url: Optional[str] = None
    attachment_type: Optional[str] = None
    reply_to_id: Optional[UUID] = None
    created_at: datetime

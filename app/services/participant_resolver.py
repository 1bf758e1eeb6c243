"""Resolve chat participants to their rendering language."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.chat import ParticipantKind
from app.schemas.chat import ResolvedParticipant
from app.services.chat_service import ChatService
from app.services.guest_session_service import GuestSessionService
from app.services.profile_service import ProfileService


class ParticipantResolver:
    def __init__(self, db: Session, default_language: Optional[str] = None) -> None:
        self.db = db
        self.default_language = default_language or get_settings().default_language

    def resolve(self, chat_id: UUID) -> List[ResolvedParticipant]:
        """
        Every participant exactly once, in join order. Profiles win over guest
        sessions; an id matching neither gets the default language.
        """
        participant_ids = list(dict.fromkeys(ChatService(self.db).get_participant_ids(chat_id)))
        if not participant_ids:
            return []

        profiles = {
            p.id: p for p in ProfileService(self.db).get_profiles_by_ids(participant_ids)
        }
        guest_ids = [pid for pid in participant_ids if pid not in profiles]
        guests = {
            g.id: g
            for g in GuestSessionService(self.db).get_guest_sessions_by_ids(guest_ids)
        }

        resolved: List[ResolvedParticipant] = []
        for pid in participant_ids:
            if pid in profiles:
                language = profiles[pid].preferred_language
                kind = ParticipantKind.USER
            elif pid in guests:
                language = guests[pid].preferred_language
                kind = ParticipantKind.GUEST
            else:
                language = None
                kind = ParticipantKind.USER
            resolved.append(
                ResolvedParticipant(
                    id=pid,
                    target_language=language or self.default_language,
                    kind=kind,
                )
            )
        return resolved

    def language_of(self, participant_id: UUID) -> Optional[str]:
        """Preferred language of a single profile or guest session, if known."""
        profile = ProfileService(self.db).get_profile(participant_id)
        if profile is not None:
            return profile.preferred_language
        guest = GuestSessionService(self.db).get_guest_session(participant_id)
        if guest is not None:
            return guest.preferred_language
        return None

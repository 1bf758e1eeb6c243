"""Maintenance API: on-demand reaper sweep."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.commands.sweep_ephemeral_chats_command import SweepEphemeralChatsCommand
from app.config import get_settings
from app.db import get_db
from app.exceptions import Unauthorized
from app.schemas.guest import SweepResponse

maintenance_router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


def require_maintenance_token(
    x_maintenance_token: Optional[str] = Header(default=None),
) -> None:
    expected = get_settings().maintenance_token
    if expected and not secrets.compare_digest(x_maintenance_token or "", expected):
        raise Unauthorized("Invalid maintenance token")


@maintenance_router.post("/sweep-ephemeral", response_model=SweepResponse)
def sweep_ephemeral(
    _authorized: None = Depends(require_maintenance_token),
    db: Session = Depends(get_db),
) -> SweepResponse:
    result = SweepEphemeralChatsCommand(db).execute()
    return SweepResponse(
        deleted_count=result.deleted_count, failed_count=result.failed_count
    )

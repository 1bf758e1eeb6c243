"""Profile API: QR slug rotation."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.commands.rotate_qr_slug_command import RotateQrSlugCommand
from app.db import get_db
from app.models.profile import Profile
from app.schemas.guest import RotateSlugResponse

profiles_router = APIRouter(prefix="/profiles", tags=["Profile"])


@profiles_router.post("/me/qr-slug", response_model=RotateSlugResponse)
def rotate_qr_slug(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RotateSlugResponse:
    """Issue a new QR slug. The previous slug stops working immediately."""
    slug, url = RotateQrSlugCommand(db).execute(current_user.id)
    return RotateSlugResponse(new_slug=slug, join_url=url)

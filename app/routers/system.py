from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.utils.datetime_utils import utcnow

router = APIRouter(
    tags=["system"],
    responses={404: {"description": "Not found"}},
)


class PingResponse(BaseModel):
    ok: bool = True
    ts: datetime


@router.get("/ping", response_model=PingResponse)
def ping() -> PingResponse:
    """Liveness check."""
    return PingResponse(ok=True, ts=utcnow())

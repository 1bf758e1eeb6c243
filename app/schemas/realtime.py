"""Change events pushed to realtime subscribers."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from app.constants.chat import ChangeTable


class ChangeEvent(BaseModel):
    """One inserted row, shaped like a database change notification."""

    table: ChangeTable
    type: Literal["INSERT"] = "INSERT"
    record: dict[str, Any]

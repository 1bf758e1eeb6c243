"""Realtime API: stream inserted messages and the caller's translations for one chat."""

from __future__ import annotations

import asyncio
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, status
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.auth.dependencies import resolve_token
from app.commands.chat_access import load_chat_for
from app.db import get_db
from app.exceptions import ChatServiceError
from app.infra.logging_config import get_logger
from app.realtime.relay import ChangeRelay, Subscription, get_change_relay

logger = get_logger("realtime")

realtime_router = APIRouter(prefix="/realtime", tags=["Realtime"])


async def _forward_events(websocket: WebSocket, sub: Subscription) -> None:
    while True:
        event = await sub.get()
        await websocket.send_json(event.model_dump(mode="json"))


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@realtime_router.websocket("/chats/{chat_id}")
async def chat_changes(
    websocket: WebSocket,
    chat_id: UUID,
    token: str = Query(...),
    db: Session = Depends(get_db),
    relay: ChangeRelay = Depends(get_change_relay),
) -> None:
    try:
        principal = resolve_token(token)
        load_chat_for(db, chat_id, principal)
    except ChatServiceError as e:
        logger.info("Rejected realtime subscription to %s: %s", chat_id, e.message)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    # Subscribe before accepting so nothing inserted after the handshake is missed
    try:
        sub = await relay.subscribe(chat_id, principal.id)
    except RedisError:
        logger.exception("Realtime subscription to %s failed", chat_id)
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return
    await websocket.accept()
    forward = asyncio.create_task(_forward_events(websocket, sub))
    disconnect = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        done, pending = await asyncio.wait(
            {forward, disconnect}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        # The pub/sub connection must be idle before it is unsubscribed
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.info("Realtime stream for %s ended: %r", chat_id, task.exception())
    finally:
        await relay.unsubscribe(sub)

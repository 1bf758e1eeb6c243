"""Shared Redis connections for rate limiting and the realtime relay."""

from __future__ import annotations

from typing import Optional

import redis
import redis.asyncio

from app.config import get_settings

_client: Optional[redis.Redis] = None
_async_client: Optional[redis.asyncio.Redis] = None


def get_redis_client() -> redis.Redis:
    """FastAPI dependency; connections are opened lazily by redis-py."""
    global _client
    if _client is None:
        _client = redis.Redis.from_url(get_settings().redis_url)
    return _client


def get_async_redis_client() -> redis.asyncio.Redis:
    """Client for pub/sub subscriptions held open by WebSocket handlers."""
    global _async_client
    if _async_client is None:
        _async_client = redis.asyncio.Redis.from_url(get_settings().redis_url)
    return _async_client

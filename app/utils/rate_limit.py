"""
Per-client fixed-window rate limiting in Redis.

The key includes the window number, so each minute starts a fresh counter and
every instance behind a load balancer shares it. If Redis is unavailable the
request is allowed and the failure logged.
"""

from __future__ import annotations

import time
from typing import Optional, Tuple

from app.infra.logging_config import get_logger

logger = get_logger("rate_limit")

WINDOW_SECONDS = 60


def check_rate_limit(
    scope: str,
    client_key: str,
    redis_client: Optional[object],
    limit_per_minute: Optional[int],
    now: Optional[float] = None,
) -> Tuple[bool, int]:
    """
    Count one request for (scope, client_key) in the current window.

    Returns (allowed, retry_after_seconds).
    If redis_client or limit_per_minute is None, always allowed.
    """
    if redis_client is None or limit_per_minute is None or limit_per_minute <= 0:
        return True, 0
    now = time.time() if now is None else now
    window = int(now // WINDOW_SECONDS)
    retry_after = max(1, int(WINDOW_SECONDS - (now % WINDOW_SECONDS)))
    key = f"polyglot:ratelimit:{scope}:{client_key}:{window}"
    try:
        pipe = redis_client.pipeline()
        pipe.incr(key)
        pipe.expire(key, WINDOW_SECONDS * 2)
        results = pipe.execute()
        count = results[0] if results else 0
    except Exception as e:
        logger.warning("Rate limit check failed, allowing request: %s", e)
        return True, 0
    if count > limit_per_minute:
        return False, retry_after
    return True, 0


def client_ip(forwarded_for: Optional[str], real_ip: Optional[str], peer: Optional[str]) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return real_ip or peer or "unknown"

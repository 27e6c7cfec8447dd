"""Fixed window rate limiting backed by Redis.

Each client gets one counter per key, ``ratelimit:{ident}:{key}``. The first
hit in a window sets the counter's TTL to the window length; further hits
only increment it. Requests are allowed while the counter stays at or below
``limit``; once the key expires the window starts over. Only ``INCR`` and
``EXPIRE`` are needed, so no Lua scripts are involved.
"""

from __future__ import annotations

from redis.asyncio import Redis


def bucket_key(ident: str, key: str) -> str:
    return f"ratelimit:{ident}:{key}"


async def allow(
    redis: Redis,
    ident: str,
    key: str,
    limit: int = 5,
    window_secs: int = 900,
) -> bool:
    """Return ``True`` if the request is within the rate limit.

    Parameters
    ----------
    redis:
        Redis connection used for accounting.
    ident:
        Client identity, usually the caller's IP address.
    key:
        Additional bucket key (e.g. an endpoint name).
    limit:
        Maximum attempts allowed per window.
    window_secs:
        Length of the fixed window in seconds.
    """

    bucket = bucket_key(ident, key)
    count = await redis.incr(bucket)
    if count == 1:
        await redis.expire(bucket, window_secs)
    return count <= limit


async def retry_after(redis: Redis, ident: str, key: str) -> int:
    """Return seconds until the window for ``ident``/``key`` resets."""

    ttl = await redis.ttl(bucket_key(ident, key))
    return max(int(ttl), 0)

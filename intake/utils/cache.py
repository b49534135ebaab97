from __future__ import annotations
import os
import redis

_clients: dict[str, redis.Redis] = {}


def r(url: str | None = None) -> redis.Redis:
    """Shared Redis client per URL; backs the redis rate-limit store."""
    url = url or os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")
    client = _clients.get(url)
    if client is None:
        client = _clients[url] = redis.Redis.from_url(url, decode_responses=True)
    return client

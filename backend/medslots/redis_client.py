# backend/medslots/redis_client.py
"""
Redis client construction.

The client is created once at startup, stored on app.state and closed at
shutdown. Handlers receive it through the get_redis dependency.
"""

from fastapi import Request
from redis import Redis

REDIS_SOCKET_TIMEOUT = 2.0


def create_redis(redis_url: str) -> Redis:
    return Redis.from_url(
        redis_url,
        decode_responses=True,
        socket_timeout=REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT,
    )


def get_redis(request: Request) -> Redis:
    return request.app.state.redis

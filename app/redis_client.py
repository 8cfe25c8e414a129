import redis
import redis.asyncio as aioredis
from typing import Optional

from app.config import settings

# Shared Redis client for sessions, rate limiting and the dashboard channel
redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client"""
    global redis_client
    if redis_client is None:
        redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True,  # Automatically decode bytes to strings
            socket_connect_timeout=5,
            socket_timeout=5,
        )
    return redis_client


def close_redis():
    """Close Redis connection"""
    global redis_client
    if redis_client:
        redis_client.close()
        redis_client = None


# Async client for pub/sub consumers (the dashboard WebSocket relay)
async_redis_client: Optional[aioredis.Redis] = None


def get_async_redis_client() -> aioredis.Redis:
    """Get or create the shared asyncio Redis client"""
    global async_redis_client
    if async_redis_client is None:
        async_redis_client = aioredis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True,
        )
    return async_redis_client


async def close_async_redis():
    global async_redis_client
    if async_redis_client:
        await async_redis_client.aclose()
        async_redis_client = None

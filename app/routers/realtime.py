"""
Dashboard WebSocket.

Each connection subscribes to the realtime Redis channel and relays every
published message verbatim ({"event": ..., "data": ...}). Messages sent by
the browser are read and ignored so disconnects are noticed.
"""
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from redis.exceptions import RedisError

from app.config import settings
from app.redis_client import get_async_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


async def _forward(websocket: WebSocket, pubsub) -> None:
    async for message in pubsub.listen():
        if message.get("type") != "message":
            continue
        await websocket.send_text(message["data"])


async def _drain(websocket: WebSocket) -> None:
    while True:
        await websocket.receive_text()


@router.websocket("/ws/dashboard")
async def dashboard_socket(websocket: WebSocket):
    await websocket.accept()
    pubsub = get_async_redis_client().pubsub()
    try:
        await pubsub.subscribe(settings.realtime_channel)
    except RedisError as e:
        logger.error("Realtime subscribe failed: %s", e)
        await websocket.close(code=1011)
        return

    logger.info("Dashboard connected to channel %s", settings.realtime_channel)
    forward = asyncio.create_task(_forward(websocket, pubsub))
    drain = asyncio.create_task(_drain(websocket))
    try:
        done, pending = await asyncio.wait({forward, drain}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.error("Dashboard relay stopped: %s", exc)
    finally:
        await pubsub.unsubscribe(settings.realtime_channel)
        await pubsub.aclose()
        logger.info("Dashboard disconnected")

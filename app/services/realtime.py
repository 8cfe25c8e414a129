"""
Real-time notifications for connected dashboards.

Events are published as JSON {"event": name, "data": payload} on a Redis
pub/sub channel; the /ws/dashboard socket relays the channel to browsers.
"""
import json
import logging
from typing import Any, Dict

import redis

from app.config import settings
from app.redis_client import get_redis_client

logger = logging.getLogger(__name__)

NEW_REACTION = "new_reaction"
REACTION_REMOVED = "reaction_removed"
NEW_COMMENT = "new_comment"
COMMENT_REMOVED = "comment_removed"
NEW_REPLY = "new_reply"
COMMENT_DELETED = "comment_deleted"
NEW_ORDER = "new_order"
ORDER_UPDATED = "order_updated"
USER_BANNED = "user_banned"
USER_UNBANNED = "user_unbanned"
USER_DATA_REMOVED = "user_data_removed"
DATA_CLEANUP = "data_cleanup"
WEBHOOK_CREATED = "webhook_created"
WEBHOOK_UPDATED = "webhook_updated"
WEBHOOK_DELETED = "webhook_deleted"


def encode_message(event: str, payload: Dict[str, Any]) -> str:
    return json.dumps({"event": event, "data": payload}, default=str)


def notify(event: str, payload: Dict[str, Any]) -> bool:
    """Publish an event to the dashboard channel. Returns False if nothing was sent."""
    if not settings.realtime_enabled:
        return False
    try:
        get_redis_client().publish(settings.realtime_channel, encode_message(event, payload))
    except redis.RedisError as e:
        logger.error("Realtime publish of %s failed: %s", event, e)
        return False
    return True

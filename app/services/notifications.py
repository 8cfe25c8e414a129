"""
Fan-out of domain events to webhook subscribers and dashboards.

This is intentionally thin. Routers decide what happened; this module
handles the how: webhook delivery (inline or via Celery) and the
real-time channel. Neither path raises into the caller.
"""
import logging
from typing import Any, Dict, Optional

from kombu.exceptions import OperationalError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.webhook import WebhookType
from app.services import realtime
from app.services.webhook_dispatcher import dispatch

logger = logging.getLogger(__name__)


def trigger_webhooks(db: Session, category: WebhookType, payload: Dict[str, Any]) -> None:
    """Deliver payload to subscribers of category, inline or through the task queue."""
    if settings.webhook_dispatch_mode == "celery":
        from app.tasks import deliver_webhooks
        try:
            deliver_webhooks.delay(category.value, payload)
        except OperationalError as e:
            logger.error("Could not enqueue %s webhooks: %s", category.value, e)
        return

    try:
        dispatch(db, category, payload)
    except SQLAlchemyError as e:
        logger.error("Error loading %s webhooks: %s", category.value, e)


def publish_event(
    db: Session,
    category: WebhookType,
    webhook_payload: Dict[str, Any],
    event: str,
    realtime_payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Send webhook_payload to subscribers and the realtime payload to dashboards."""
    trigger_webhooks(db, category, webhook_payload)
    realtime.notify(event, realtime_payload if realtime_payload is not None else webhook_payload)

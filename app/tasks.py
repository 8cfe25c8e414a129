"""
Celery tasks for async processing

Tasks:
- deliver_webhooks: POST an event to every active subscriber of its category,
  used when webhook_dispatch_mode is "celery" so API responses do not wait on
  subscriber latency
"""
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.celery_app import celery_app
from app.database import SessionLocal
from app.models.webhook import WebhookType
from app.services.webhook_dispatcher import dispatch

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.deliver_webhooks")
def deliver_webhooks(category: str, payload: Dict[str, Any]):
    """
    Deliver one event to its subscribers.
    Failed deliveries are logged by the dispatcher and not retried.
    """
    db: Session = SessionLocal()
    try:
        results = dispatch(db, WebhookType(category), payload)
        delivered = sum(1 for r in results if r.success)
        logger.info("Delivered %s event to %d/%d webhooks", category, delivered, len(results))
        return {"category": category, "attempted": len(results), "delivered": delivered}
    finally:
        db.close()

"""
Outbound webhook delivery.

Every active subscription for an event category receives
POST {type, timestamp, data} with its custom headers merged over the JSON
content type. Deliveries are sequential and independent: a failing
subscriber is logged and skipped, never retried, and never surfaces to the
request that triggered the event.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy.orm import Session

from app.config import settings
from app.models.webhook import WebhookConfig, WebhookType

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    webhook_id: int
    name: str
    url: str
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def build_envelope(category: WebhookType, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": category.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": payload,
    }


def build_headers(webhook: WebhookConfig) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    for key, value in (webhook.headers or {}).items():
        headers[str(key)] = str(value)
    return headers


def active_subscriptions(db: Session, category: WebhookType) -> List[WebhookConfig]:
    return db.query(WebhookConfig).filter(
        WebhookConfig.type == category,
        WebhookConfig.is_active.is_(True),
    ).all()


def deliver(client: httpx.Client, webhook: WebhookConfig, envelope: Dict[str, Any]) -> DeliveryResult:
    """POST one envelope to one subscriber. Never raises; failures come back in the result."""
    result = DeliveryResult(webhook_id=webhook.id, name=webhook.name, url=webhook.url, success=False)
    try:
        resp = client.post(webhook.url, json=envelope, headers=build_headers(webhook))
        result.status_code = resp.status_code
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        result.error = f"HTTP {e.response.status_code}"
        if e.response.status_code == 404:
            logger.error(
                "Webhook %s failed: 404, URL not found or incorrect: %s", webhook.name, webhook.url
            )
        else:
            logger.error(
                "Webhook %s failed: %s %s (%s)",
                webhook.name, e.response.status_code, e.response.reason_phrase, webhook.url,
            )
        return result
    except httpx.TimeoutException as e:
        result.error = f"timeout: {e}"
        logger.error(
            "Webhook %s timed out after %ss: %s",
            webhook.name, settings.webhook_timeout_seconds, webhook.url,
        )
        return result
    except httpx.ConnectError as e:
        result.error = f"connection refused: {e}"
        logger.error("Webhook %s connection refused: cannot connect to %s", webhook.name, webhook.url)
        return result
    except httpx.HTTPError as e:
        result.error = str(e)
        logger.error("Webhook %s failed: %s (%s)", webhook.name, e, webhook.url)
        return result
    except Exception as e:
        # Bad URL or header encoding, raised before any request is sent
        result.error = f"{type(e).__name__}: {e}"
        logger.exception("Webhook %s could not be sent to %s", webhook.name, webhook.url)
        return result

    result.success = True
    logger.info("Webhook delivered: %s (%s) -> %s", webhook.name, envelope["type"], resp.status_code)
    return result


def dispatch(db: Session, category: WebhookType, payload: Dict[str, Any]) -> List[DeliveryResult]:
    """Deliver payload to every active subscription of category, one after another."""
    webhooks = active_subscriptions(db, category)
    if not webhooks:
        logger.info("No active webhooks configured for type %s", category.value)
        return []

    logger.info("Triggering %s webhooks: %d active", category.value, len(webhooks))
    envelope = build_envelope(category, payload)
    results = []
    with httpx.Client(timeout=settings.webhook_timeout_seconds) as client:
        for webhook in webhooks:
            results.append(deliver(client, webhook, envelope))
    return results

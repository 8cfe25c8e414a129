"""
Outbound webhook subscriptions - owner only.

Subscribers are notified by app.services.webhook_dispatcher; this router only
manages the registry.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.webhook import WebhookConfig
from app.schemas.webhooks import (
    WebhookCreate,
    WebhookUpdate,
    WebhookResponse,
    WebhookEnvelope,
    WebhookListResponse,
)
from app.auth.dependencies import require_owner
from app.services import realtime
from app.services.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


def _get_webhook(db: Session, webhook_id: int) -> WebhookConfig:
    webhook = db.query(WebhookConfig).filter(WebhookConfig.id == webhook_id).first()
    if not webhook:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook not found")
    return webhook


@router.get("", response_model=WebhookListResponse)
def list_webhooks(
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_owner),
):
    webhooks = db.query(WebhookConfig).order_by(WebhookConfig.created_at.desc()).all()
    return WebhookListResponse(data=[WebhookResponse.model_validate(w) for w in webhooks])


@router.post("", response_model=WebhookEnvelope, status_code=status.HTTP_201_CREATED)
def create_webhook(
    data: WebhookCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_owner),
):
    webhook = WebhookConfig(
        name=data.name,
        url=data.url,
        type=data.type,
        headers=data.headers,
        description=data.description,
        is_active=data.is_active,
    )
    db.add(webhook)
    log_activity(
        db, current_admin["username"], "WEBHOOK_CREATED",
        {"name": data.name, "type": data.type.value}, request,
    )
    db.commit()
    db.refresh(webhook)
    logger.info("Webhook %s created for %s -> %s", webhook.name, webhook.type.value, webhook.url)

    response = WebhookResponse.model_validate(webhook)
    realtime.notify(realtime.WEBHOOK_CREATED, response.model_dump(mode="json"))
    return WebhookEnvelope(message="Webhook created successfully", data=response)


@router.put("/{webhook_id}", response_model=WebhookEnvelope)
def update_webhook(
    webhook_id: int,
    data: WebhookUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_owner),
):
    webhook = _get_webhook(db, webhook_id)

    # Only description may be cleared; null for any other field means "unchanged"
    changes = {
        field: value for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }
    for field, value in changes.items():
        setattr(webhook, field, value)

    log_activity(
        db, current_admin["username"], "WEBHOOK_UPDATED",
        {"webhook_id": webhook_id, "fields": sorted(changes)}, request,
    )
    db.commit()
    db.refresh(webhook)

    response = WebhookResponse.model_validate(webhook)
    realtime.notify(realtime.WEBHOOK_UPDATED, response.model_dump(mode="json"))
    return WebhookEnvelope(message="Webhook updated successfully", data=response)


@router.delete("/{webhook_id}")
def delete_webhook(
    webhook_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_owner),
):
    webhook = _get_webhook(db, webhook_id)
    name = webhook.name

    db.delete(webhook)
    log_activity(db, current_admin["username"], "WEBHOOK_DELETED", {"webhook_id": webhook_id, "name": name}, request)
    db.commit()

    realtime.notify(realtime.WEBHOOK_DELETED, {"id": webhook_id, "name": name})
    return {"success": True, "message": "Webhook deleted successfully"}

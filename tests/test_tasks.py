"""Tests for Celery tasks (app/tasks.py)"""
import pytest
from unittest.mock import MagicMock, patch

from app.models.webhook import WebhookType
from app.services.webhook_dispatcher import DeliveryResult
from app.tasks import deliver_webhooks


def test_deliver_webhooks_counts_successes():
    session = MagicMock()
    results = [
        DeliveryResult(webhook_id=1, name="a", url="http://a", success=True, status_code=200),
        DeliveryResult(webhook_id=2, name="b", url="http://b", success=False, error="HTTP 500"),
    ]
    with patch("app.tasks.SessionLocal", return_value=session), \
            patch("app.tasks.dispatch", return_value=results) as mock_dispatch:
        outcome = deliver_webhooks("ORDER", {"order_id": "ORD1"})

    mock_dispatch.assert_called_once_with(session, WebhookType.ORDER, {"order_id": "ORD1"})
    assert outcome == {"category": "ORDER", "attempted": 2, "delivered": 1}
    session.close.assert_called_once()


def test_deliver_webhooks_closes_session_on_error():
    session = MagicMock()
    with patch("app.tasks.SessionLocal", return_value=session), \
            patch("app.tasks.dispatch", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            deliver_webhooks("ORDER", {})
    session.close.assert_called_once()

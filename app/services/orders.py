"""Order intake and status changes."""
import logging
import random
import time
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationFailed
from app.models.order import Order, OrderStatus
from app.schemas.orders import OrderResponse
from app.services.action_types import require_fields

logger = logging.getLogger(__name__)

ORDER_REQUIRED = (
    "name", "number", "address", "product_name",
    "total_product", "total_price", "sender_id", "recipient_id",
)
_ORDER_COLUMNS = ORDER_REQUIRED + ("text",)


def generate_order_id() -> str:
    """ORD + epoch milliseconds + three random digits"""
    return f"ORD{int(time.time() * 1000)}{random.randint(0, 999):03d}"


def serialize_order(order: Order) -> Dict[str, Any]:
    data = OrderResponse.model_validate(order).model_dump(mode="json")
    extra = data.pop("extra") or {}
    return {**extra, **data}


def _parse_total_product(raw: Any) -> int:
    try:
        value = int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        value = None
    if value is None or value < 1:
        raise ValidationFailed(
            "Invalid total_product value. Must be a valid number greater than 0",
            error="VALIDATION_ERROR",
            details={
                "field": "total_product",
                "received": raw,
                "expected": "A valid positive number (e.g., 1, 2, 3)",
            },
        )
    return value


def _parse_total_price(raw: Any) -> float:
    try:
        value = float(str(raw).strip())
    except ValueError:
        value = None
    if value is None or value != value or value < 0:
        raise ValidationFailed(
            "Invalid total_price value. Must be a valid number",
            error="VALIDATION_ERROR",
            details={
                "field": "total_price",
                "received": raw,
                "expected": "A valid number (e.g., 100, 250.50)",
            },
        )
    return value


def create_order(db: Session, raw: Dict[str, Any]) -> Order:
    require_fields(raw, ORDER_REQUIRED)
    total_product = _parse_total_product(raw["total_product"])
    total_price = _parse_total_price(raw["total_price"])

    order = Order(
        order_id=generate_order_id(),
        name=str(raw["name"]).strip(),
        number=str(raw["number"]).strip(),
        address=str(raw["address"]).strip(),
        product_name=str(raw["product_name"]).strip(),
        total_product=total_product,
        total_price=total_price,
        text=str(raw["text"]).strip() if raw.get("text") else None,
        sender_id=str(raw["sender_id"]),
        recipient_id=str(raw["recipient_id"]),
        status=OrderStatus.PENDING,
        extra={k: v for k, v in raw.items() if k not in _ORDER_COLUMNS and v is not None},
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info(
        "New order created with ID: %s (%s x%d, %.2f)",
        order.order_id, order.product_name, order.total_product, order.total_price,
    )
    return order


def parse_status(raw: Optional[str]) -> OrderStatus:
    value = (raw or "").strip().upper()
    if value not in OrderStatus.__members__:
        raise ValidationFailed(
            "Valid status is required (PENDING, CONFIRMED, DELIVERED, CANCELLED)"
        )
    return OrderStatus(value)


def update_status(
    db: Session,
    order_id: str,
    status: Optional[str],
    reason: Optional[str] = None,
    message: Optional[str] = None,
) -> Tuple[Order, OrderStatus]:
    """Change an order's status. Returns (order, previous status)."""
    new_status = parse_status(status)
    order = db.query(Order).filter(Order.order_id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")

    previous = order.status
    order.status = new_status
    if new_status == OrderStatus.CANCELLED:
        if reason:
            order.cancel_reason = reason
        if message:
            order.cancel_message = message
    db.commit()
    db.refresh(order)
    logger.info("Order %s status updated from %s to %s", order_id, previous.value, new_status.value)
    return order, previous

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.order import Order, OrderStatus
from app.models.webhook import WebhookType
from app.schemas.common import Pagination
from app.schemas.orders import OrderCreate, OrderStatusUpdate
from app.auth.dependencies import require_auth
from app.services import orders as order_service
from app.services import realtime
from app.services.notifications import publish_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Orders"])


@router.post("/create-order", status_code=status.HTTP_201_CREATED)
def create_order(body: OrderCreate, db: Session = Depends(get_db)):
    """Public order intake"""
    order = order_service.create_order(db, body.model_dump())
    data = order_service.serialize_order(order)

    publish_event(
        db,
        WebhookType.ORDER,
        {**data, "webhook_type": "ORDER_CREATED"},
        realtime.NEW_ORDER,
        data,
    )
    return {"success": True, "message": "Order created successfully", "data": data}


@router.get("/all-orders")
def all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    query = db.query(Order)
    if status_filter and status_filter.upper() != "ALL":
        query = query.filter(Order.status == order_service.parse_status(status_filter))

    total = query.count()
    orders = query.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "success": True,
        "count": total,
        "data": [order_service.serialize_order(o) for o in orders],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/order-stats")
def order_stats(db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    counts = dict(db.query(Order.status, func.count(Order.id)).group_by(Order.status).all())
    return {
        "success": True,
        "stats": {
            "totalOrders": sum(counts.values()),
            "pendingOrders": counts.get(OrderStatus.PENDING, 0),
            "confirmedOrders": counts.get(OrderStatus.CONFIRMED, 0),
            "deliveredOrders": counts.get(OrderStatus.DELIVERED, 0),
            "cancelledOrders": counts.get(OrderStatus.CANCELLED, 0),
        },
    }


@router.get("/order/{order_id}")
def get_order(order_id: str, db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    order = db.query(Order).filter(Order.order_id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return {"success": True, "data": order_service.serialize_order(order)}


@router.put("/update-order-status/{order_id}")
def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    order, previous = order_service.update_status(db, order_id, body.status, body.reason, body.message)
    data = order_service.serialize_order(order)

    publish_event(
        db,
        WebhookType.ORDER,
        {
            **data,
            "webhook_type": "ORDER_STATUS_UPDATED",
            "action": "STATUS_UPDATE",
            "status_change": {
                "from": previous.value,
                "to": order.status.value,
                "reason": body.reason,
                "message": body.message,
            },
        },
        realtime.ORDER_UPDATED,
        data,
    )
    return {"success": True, "message": f"Order status updated to {order.status.value}", "data": data}


@router.get("/orders")
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    sender_id: Optional[str] = None,
    recipient_id: Optional[str] = None,
    order_id: Optional[str] = None,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    query = db.query(Order)
    if status_filter:
        query = query.filter(Order.status == order_service.parse_status(status_filter))
    if sender_id:
        query = query.filter(Order.sender_id == sender_id)
    if recipient_id:
        query = query.filter(Order.recipient_id == recipient_id)
    if order_id:
        query = query.filter(Order.order_id == order_id)

    orders = query.order_by(Order.created_at.desc()).limit(50).all()
    return {"success": True, "count": len(orders), "data": [order_service.serialize_order(o) for o in orders]}

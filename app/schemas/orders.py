from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Any, Dict

from app.models.order import OrderStatus
from app.schemas.common import IdentifierModel


class OrderCreate(IdentifierModel):
    """Inbound order. Required fields are checked in the service so the 400 lists them all."""
    name: Optional[Any] = None
    number: Optional[Any] = None
    address: Optional[Any] = None
    product_name: Optional[Any] = None
    total_product: Optional[Any] = None
    total_price: Optional[Any] = None
    sender_id: Optional[str] = None
    recipient_id: Optional[str] = None
    text: Optional[Any] = None

    class Config:
        extra = "allow"


class OrderStatusUpdate(BaseModel):
    status: str
    reason: Optional[str] = None
    message: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    order_id: str
    name: str
    number: str
    address: str
    product_name: str
    total_product: int
    total_price: float
    text: Optional[str] = None
    sender_id: str
    recipient_id: str
    status: OrderStatus
    cancel_reason: Optional[str] = None
    cancel_message: Optional[str] = None
    extra: Dict[str, Any] = {}
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

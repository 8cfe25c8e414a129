import enum
from sqlalchemy import Column, Integer, String, Text, Float, Enum, JSON

from .base import Base, TimestampMixin


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    number = Column(String(64), nullable=False)
    address = Column(Text, nullable=False)
    product_name = Column(String(255), nullable=False)
    total_product = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    text = Column(Text, nullable=True)
    sender_id = Column(String(255), nullable=False, index=True)
    recipient_id = Column(String(255), nullable=False, index=True)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)
    cancel_reason = Column(String(255), nullable=True)
    cancel_message = Column(Text, nullable=True)
    extra = Column(JSON, nullable=False, default=dict)

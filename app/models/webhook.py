import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, JSON

from .base import Base, TimestampMixin


class WebhookType(str, enum.Enum):
    """Event categories a subscription can listen to"""
    REACTION = "REACTION"
    COMMENT = "COMMENT"
    ORDER = "ORDER"
    USER_BAN = "USER_BAN"
    DATA_CLEANUP = "DATA_CLEANUP"


class WebhookConfig(TimestampMixin, Base):
    """Outbound webhook subscription. Receives only events of its own type."""
    __tablename__ = "webhook_configs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    type = Column(Enum(WebhookType), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    headers = Column(JSON, nullable=False, default=dict)
    description = Column(Text, nullable=True)

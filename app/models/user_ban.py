import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Enum

from .base import Base, TimestampMixin


class BanType(str, enum.Enum):
    """Which ingress categories a ban is meant to restrict"""
    REACTION = "REACTION"
    COMMENT = "COMMENT"
    ALL = "ALL"


class UserBan(TimestampMixin, Base):
    """
    Ban record for a social-media user identifier.

    At most one active ban per user_id. Unbanning flips is_active and keeps the row.
    """
    __tablename__ = "user_bans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=True)
    ban_type = Column(Enum(BanType), nullable=False)
    reason = Column(Text, nullable=True)
    banned_by = Column(String(150), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

from sqlalchemy import Column, Integer, String, JSON

from .base import Base, TimestampMixin


class AdminActivity(TimestampMixin, Base):
    """Append-only log of admin actions (logins, bans, data removal, account changes)"""
    __tablename__ = "admin_activities"

    id = Column(Integer, primary_key=True, index=True)
    admin_username = Column(String(150), nullable=False, index=True)
    action = Column(String(100), nullable=False)
    details = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)

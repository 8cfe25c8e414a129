import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum

from .base import Base, TimestampMixin


class AdminRole(str, enum.Enum):
    """Dashboard account roles"""
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class Admin(TimestampMixin, Base):
    """Dashboard account. Exactly one OWNER is created through /auth/setup-owner."""
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(150), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

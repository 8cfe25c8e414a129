import enum
from sqlalchemy import Column, Integer, String, Enum, JSON

from .base import Base, TimestampMixin


class ReactionType(str, enum.Enum):
    LIKE = "LIKE"
    LOVE = "LOVE"
    ANGRY = "ANGRY"
    HAHA = "HAHA"
    SAD = "SAD"
    WOW = "WOW"


class Reaction(TimestampMixin, Base):
    """
    Reaction ingress log.

    Additions are appended; a removal erases every matching row, so the
    current state is the most recent surviving row for (user_id, post_id).
    """
    __tablename__ = "reactions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    user_id = Column(String(255), nullable=False, index=True)
    reaction_type = Column(Enum(ReactionType), nullable=False)
    post_url = Column(String(2048), nullable=True)
    post_id = Column(String(255), nullable=True, index=True)
    action_type = Column(String(100), nullable=False, default="ADDED")
    previous_reaction = Column(String(50), nullable=True)
    custom_action = Column(String(255), nullable=True)
    # Inbound fields without a dedicated column
    extra = Column(JSON, nullable=False, default=dict)

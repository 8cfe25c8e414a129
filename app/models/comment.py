from sqlalchemy import Column, Integer, String, Text, JSON

from .base import Base, TimestampMixin


class Comment(TimestampMixin, Base):
    """Comment ingress log. Replies are separate rows linked by parent_comment_id."""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    user_id = Column(String(255), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    comment_id = Column(String(255), nullable=False, index=True)
    post_id = Column(String(255), nullable=False, index=True)
    post_link = Column(String(2048), nullable=True)
    action_type = Column(String(100), nullable=False, default="ADDED")
    parent_comment_id = Column(String(255), nullable=True, index=True)
    reply_to = Column(String(255), nullable=True)
    custom_action = Column(String(255), nullable=True)
    extra = Column(JSON, nullable=False, default=dict)

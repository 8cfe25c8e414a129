"""
User bans and bulk removal of a user's data.

A ban is an administrative record; ingress endpoints do not consult it.
remove_user_data is the explicit purge an admin runs alongside (or instead
of) a ban. Both are idempotent with respect to already-missing data.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import BanConflictError, NotFoundError, ValidationFailed
from app.models.comment import Comment
from app.models.order import Order
from app.models.reaction import Reaction
from app.models.user_ban import BanType, UserBan
from app.services.action_types import require_fields

logger = logging.getLogger(__name__)

BAN_REQUIRED = ("user_id", "ban_type", "banned_by")
RECENT_BAN_DAYS = 7


def active_ban(db: Session, user_id: str) -> Optional[UserBan]:
    return db.query(UserBan).filter(
        UserBan.user_id == user_id,
        UserBan.is_active.is_(True),
    ).first()


def parse_ban_type(raw: Any) -> BanType:
    value = str(raw).strip().upper()
    if value not in BanType.__members__:
        raise ValidationFailed(
            f"Invalid ban_type: {raw}",
            allowed=[t.value for t in BanType],
        )
    return BanType(value)


def create_ban(db: Session, raw: Dict[str, Any]) -> UserBan:
    """
    Ban a user. Raises BanConflictError, carrying the existing ban untouched,
    if the user already has an active one.
    """
    require_fields(raw, BAN_REQUIRED)
    ban_type = parse_ban_type(raw["ban_type"])
    user_id = str(raw["user_id"]).strip()

    existing = active_ban(db, user_id)
    if existing:
        logger.info("User %s already banned (ban %s)", user_id, existing.id)
        raise BanConflictError({
            "ban_id": existing.id,
            "ban_type": existing.ban_type.value,
            "reason": existing.reason,
            "banned_by": existing.banned_by,
            "banned_at": existing.created_at.isoformat() if existing.created_at else None,
        })

    ban = UserBan(
        user_id=user_id,
        user_name=raw.get("user_name"),
        ban_type=ban_type,
        reason=raw.get("reason"),
        banned_by=str(raw["banned_by"]),
        is_active=True,
    )
    db.add(ban)
    db.commit()
    db.refresh(ban)
    logger.info("User %s banned successfully (%s)", user_id, ban_type.value)
    return ban


def unban(db: Session, user_id: str) -> UserBan:
    """Deactivate the active ban. The record is kept."""
    ban = active_ban(db, user_id)
    if not ban:
        raise NotFoundError("User not found in banned list")

    ban.is_active = False
    db.commit()
    db.refresh(ban)
    logger.info("User %s unbanned successfully", user_id)
    return ban


def list_bans(db: Session, filter_type: str = "ALL", page: int = 1, limit: int = 50):
    """Active bans, newest first. Returns (bans, total)."""
    query = db.query(UserBan).filter(UserBan.is_active.is_(True))
    if filter_type and filter_type.upper() != "ALL":
        query = query.filter(UserBan.ban_type == parse_ban_type(filter_type))

    total = query.count()
    bans = query.order_by(UserBan.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return bans, total


@dataclass
class RemovalCounts:
    reactions: int = 0
    comments: int = 0
    orders: int = 0

    @property
    def total(self) -> int:
        return self.reactions + self.comments + self.orders

    def as_dict(self) -> Dict[str, int]:
        return {"reactions": self.reactions, "comments": self.comments, "orders": self.orders}


def remove_user_data(db: Session, user_id: str) -> RemovalCounts:
    """Delete every reaction and comment by user_id and every order they sent or received."""
    counts = RemovalCounts()
    counts.reactions = db.query(Reaction).filter(
        Reaction.user_id == user_id
    ).delete(synchronize_session=False)
    counts.comments = db.query(Comment).filter(
        Comment.user_id == user_id
    ).delete(synchronize_session=False)
    counts.orders = db.query(Order).filter(
        or_(Order.sender_id == user_id, Order.recipient_id == user_id)
    ).delete(synchronize_session=False)
    db.commit()

    logger.info(
        "Removed data for user %s: reactions=%d comments=%d orders=%d",
        user_id, counts.reactions, counts.comments, counts.orders,
    )
    return counts


def ban_stats(db: Session) -> Dict[str, int]:
    def count_active(*criteria) -> int:
        return db.query(func.count(UserBan.id)).filter(
            UserBan.is_active.is_(True), *criteria
        ).scalar() or 0

    since = datetime.now(timezone.utc) - timedelta(days=RECENT_BAN_DAYS)
    return {
        "totalBanned": count_active(),
        "reactionBans": count_active(UserBan.ban_type == BanType.REACTION),
        "commentBans": count_active(UserBan.ban_type == BanType.COMMENT),
        "allBans": count_active(UserBan.ban_type == BanType.ALL),
        "recentBans": count_active(UserBan.created_at >= since),
    }


@dataclass
class CleanupResult:
    cutoff: datetime
    deleted_reactions: int
    deleted_comments: int

    @property
    def total(self) -> int:
        return self.deleted_reactions + self.deleted_comments


def cleanup_old_data(db: Session, retention_days: Optional[int] = None) -> CleanupResult:
    """Delete reactions and comments created before the retention window."""
    days = retention_days if retention_days is not None else settings.cleanup_retention_days
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)

    reactions = db.query(Reaction).filter(Reaction.created_at < cutoff).delete(synchronize_session=False)
    comments = db.query(Comment).filter(Comment.created_at < cutoff).delete(synchronize_session=False)
    db.commit()

    logger.info("Data cleanup completed: %d reactions, %d comments", reactions, comments)
    return CleanupResult(cutoff=cutoff, deleted_reactions=reactions, deleted_comments=comments)

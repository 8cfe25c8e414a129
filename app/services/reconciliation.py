"""
Reconciliation of reaction and comment events against the store.

An event is classified once (see action_types) and then applied:

    ADD / REPLY  -> insert a new row; duplicates are allowed
    REMOVE       -> delete every row matching the event key, keep no history

Reaction key: (user_id, post_id, reaction_type)
Comment key:  (user_id, comment_id, post_id)

A REMOVE that matches nothing is a success with deleted_count == 0.

Services commit their own writes. Fan-out to webhooks and dashboards is left
to the caller, which gets the payloads from the *_payload helpers below.
"""
import logging
import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationFailed
from app.models.comment import Comment
from app.models.reaction import Reaction, ReactionType
from app.schemas.comments import CommentResponse
from app.schemas.reactions import ReactionResponse
from app.services.action_types import (
    ActionKind,
    ClassifiedAction,
    is_removal_action,
    parse_action_type,
    require_fields,
)

logger = logging.getLogger(__name__)

REACTION_REQUIRED = ("user_id", "reaction_type")
COMMENT_REQUIRED = ("user_id", "comment", "comment_id", "post_id")
REPLY_REQUIRED = ("parent_comment_id", "reply_text", "user_id", "post_id")

_REACTION_COLUMNS = (
    "name", "user_id", "reaction_type", "post_url", "post_id",
    "action_type", "previous_reaction", "custom_action",
)
_COMMENT_COLUMNS = (
    "name", "user_id", "comment", "comment_id", "post_id", "post_link",
    "action_type", "parent_comment_id", "reply_to", "custom_action",
)


@dataclass
class ReconcileResult:
    action: ClassifiedAction
    # Normalized event, extras flattened in
    data: Dict[str, Any]
    key: Dict[str, Any]
    record: Optional[Any] = None
    deleted_count: int = 0

    @property
    def removed(self) -> bool:
        return self.action.is_removal


@dataclass
class ReplyResult:
    reply: Comment
    deleted_parent: Optional[Dict[str, Any]] = None
    parent_deleted: bool = False
    notes: List[str] = field(default_factory=list)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _split_extra(data: Dict[str, Any], columns) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in columns and v is not None}


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


# Serialization

def serialize_reaction(reaction: Reaction) -> Dict[str, Any]:
    """Flat JSON-safe dict of a reaction, extras merged under the typed fields."""
    data = ReactionResponse.model_validate(reaction).model_dump(mode="json")
    extra = data.pop("extra") or {}
    return {**extra, **data}


def serialize_comment(comment: Comment) -> Dict[str, Any]:
    data = CommentResponse.model_validate(comment).model_dump(mode="json")
    extra = data.pop("extra") or {}
    return {**extra, **data}


# Reactions

def normalize_reaction(raw: Dict[str, Any]) -> tuple:
    """Validate and normalize an inbound reaction. Returns (data, classified action)."""
    require_fields(raw, REACTION_REQUIRED)
    action = parse_action_type(raw.get("action_type"))

    data = dict(raw)
    data["user_id"] = str(data["user_id"]).strip()
    reaction_type = str(data["reaction_type"]).strip().upper()
    if reaction_type not in ReactionType.__members__:
        raise ValidationFailed(
            f"Invalid reaction_type: {reaction_type}",
            allowed=[t.value for t in ReactionType],
        )
    data["reaction_type"] = reaction_type
    data["action_type"] = action.action_type
    if data.get("previous_reaction"):
        data["previous_reaction"] = str(data["previous_reaction"]).upper()
    if data.get("custom_action"):
        data["custom_action"] = _as_text(data["custom_action"])
    return data, action


def save_reaction(db: Session, raw: Dict[str, Any]) -> ReconcileResult:
    data, action = normalize_reaction(raw)
    key = {
        "user_id": data["user_id"],
        "post_id": data.get("post_id"),
        "reaction_type": data["reaction_type"],
    }

    if action.kind == ActionKind.REMOVE:
        deleted = db.query(Reaction).filter(
            Reaction.user_id == key["user_id"],
            Reaction.post_id == key["post_id"],
            Reaction.reaction_type == ReactionType(key["reaction_type"]),
        ).delete(synchronize_session=False)
        db.commit()
        logger.info(
            "%s %d reaction(s) for user=%s post=%s type=%s",
            action.verb, deleted, key["user_id"], key["post_id"], key["reaction_type"],
        )
        flat = {**_split_extra(data, _REACTION_COLUMNS), **{k: data.get(k) for k in _REACTION_COLUMNS}}
        return ReconcileResult(action=action, data=flat, key=key, deleted_count=deleted)

    reaction = Reaction(
        name=data.get("name"),
        user_id=data["user_id"],
        reaction_type=ReactionType(data["reaction_type"]),
        post_url=data.get("post_url"),
        post_id=data.get("post_id"),
        action_type=action.action_type,
        previous_reaction=data.get("previous_reaction"),
        custom_action=data.get("custom_action"),
        extra=_split_extra(data, _REACTION_COLUMNS),
    )
    db.add(reaction)
    db.commit()
    db.refresh(reaction)
    logger.info("New reaction action: %s with ID: %s", reaction.action_type, reaction.id)
    return ReconcileResult(action=action, data=serialize_reaction(reaction), key=key, record=reaction)


def reaction_added_payload(result: ReconcileResult) -> Dict[str, Any]:
    return {
        **result.data,
        "webhook_type": "REACTION_ADDED",
        "action": result.action.action_type,
        "timestamp": _now_iso(),
    }


def removal_payload(result: ReconcileResult, webhook_type: str) -> Dict[str, Any]:
    return {
        **result.data,
        "verb": result.action.verb,
        "action": f"{result.action.verb}_FROM_DATABASE",
        "webhook_type": webhook_type,
        "deleted_count": result.deleted_count,
        "timestamp": _now_iso(),
    }


def removal_summary(result: ReconcileResult, label: str) -> Dict[str, Any]:
    """Response body for a REMOVE event. label is "Reaction" or "Comment"."""
    verb = result.action.verb
    return {
        "success": True,
        "message": f"{label} {verb.lower()} from database - no history kept",
        "verb": verb,
        "deleted_count": result.deleted_count,
        "removed_data": result.key,
        "note": (
            f"No existing {label.lower()} found to remove"
            if result.deleted_count == 0
            else f"{label} successfully removed"
        ),
    }


def current_reaction(db: Session, user_id: str, post_id: str) -> Dict[str, Any]:
    """State of the most recent surviving reaction row for (user_id, post_id)."""
    latest = db.query(Reaction).filter(
        Reaction.user_id == user_id,
        Reaction.post_id == post_id,
    ).order_by(Reaction.created_at.desc(), Reaction.id.desc()).first()

    if not latest:
        return {
            "success": True,
            "has_reaction": False,
            "message": "No reaction found for this user and post",
        }

    active = not is_removal_action(latest.action_type)
    data = serialize_reaction(latest)
    return {
        "success": True,
        "has_reaction": active,
        "current_reaction": data["reaction_type"] if active else None,
        "last_action": latest.action_type,
        "custom_action": latest.custom_action,
        "last_updated": data["created_at"],
        "data": data,
    }


def find_reactions(
    db: Session,
    user_id: Optional[str] = None,
    reaction_type: Optional[str] = None,
    action_type: Optional[str] = None,
    post_id: Optional[str] = None,
    custom_action: Optional[str] = None,
) -> List[Reaction]:
    query = db.query(Reaction)
    if user_id:
        query = query.filter(Reaction.user_id == user_id)
    if reaction_type:
        upper = reaction_type.upper()
        if upper not in ReactionType.__members__:
            return []
        query = query.filter(Reaction.reaction_type == ReactionType(upper))
    if action_type:
        query = query.filter(Reaction.action_type.ilike(f"%{action_type}%"))
    if post_id:
        query = query.filter(Reaction.post_id == post_id)
    if custom_action:
        query = query.filter(Reaction.custom_action.ilike(f"%{custom_action}%"))
    return query.order_by(Reaction.created_at.desc()).all()


def reaction_stats(db: Session) -> Dict[str, Any]:
    total = db.query(func.count(Reaction.id)).scalar() or 0

    by_type = db.query(Reaction.reaction_type, func.count(Reaction.id).label("count")).group_by(
        Reaction.reaction_type
    ).order_by(func.count(Reaction.id).desc()).all()

    top_users = db.query(
        Reaction.user_id, func.max(Reaction.name), func.count(Reaction.id)
    ).group_by(Reaction.user_id).order_by(func.count(Reaction.id).desc()).limit(10).all()

    top_posts = db.query(
        Reaction.post_id, func.max(Reaction.post_url), func.count(Reaction.id)
    ).group_by(Reaction.post_id).order_by(func.count(Reaction.id).desc()).limit(10).all()

    return {
        "totalReactions": total,
        "reactionsByType": [
            {"reaction_type": getattr(t, "value", t), "count": c} for t, c in by_type
        ],
        "topUsers": [{"user_id": u, "name": n, "count": c} for u, n, c in top_users],
        "topPosts": [{"post_id": p, "post_url": url, "count": c} for p, url, c in top_posts],
    }


# Comments

def normalize_comment(raw: Dict[str, Any]) -> tuple:
    require_fields(raw, COMMENT_REQUIRED)
    action = parse_action_type(raw.get("action_type"))

    data = dict(raw)
    user_name = data.pop("user_name", None)
    data["name"] = data.get("name") or user_name
    for key in ("user_id", "comment_id", "post_id"):
        data[key] = str(data[key]).strip()
    data["comment"] = str(data["comment"])
    data["action_type"] = action.action_type
    if data.get("custom_action"):
        data["custom_action"] = _as_text(data["custom_action"])
    if data.get("parent_comment_id"):
        data["parent_comment_id"] = str(data["parent_comment_id"])
    if data.get("reply_to"):
        data["reply_to"] = _as_text(data["reply_to"])
    return data, action


def save_comment(db: Session, raw: Dict[str, Any]) -> ReconcileResult:
    data, action = normalize_comment(raw)
    key = {
        "user_id": data["user_id"],
        "comment_id": data["comment_id"],
        "post_id": data["post_id"],
    }

    if action.kind == ActionKind.REMOVE:
        deleted = db.query(Comment).filter(
            Comment.user_id == key["user_id"],
            Comment.comment_id == key["comment_id"],
            Comment.post_id == key["post_id"],
        ).delete(synchronize_session=False)
        db.commit()
        logger.info(
            "%s %d comment(s) for user=%s comment=%s post=%s",
            action.verb, deleted, key["user_id"], key["comment_id"], key["post_id"],
        )
        flat = {**_split_extra(data, _COMMENT_COLUMNS), **{k: data.get(k) for k in _COMMENT_COLUMNS}}
        return ReconcileResult(action=action, data=flat, key=key, deleted_count=deleted)

    comment = Comment(
        extra=_split_extra(data, _COMMENT_COLUMNS),
        **{k: data.get(k) for k in _COMMENT_COLUMNS},
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("New comment action: %s with ID: %s", comment.action_type, comment.id)
    return ReconcileResult(action=action, data=serialize_comment(comment), key=key, record=comment)


def comment_added_payload(result: ReconcileResult) -> Dict[str, Any]:
    return {
        **result.data,
        "webhook_type": "COMMENT_ADDED",
        "action": result.action.action_type,
        "timestamp": _now_iso(),
    }


def generate_reply_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"reply_{int(time.time() * 1000)}_{suffix}"


def create_reply(db: Session, raw: Dict[str, Any]) -> ReplyResult:
    """
    Store an admin reply to a comment.

    With delete_after_reply the parent comment row is removed once the reply
    is stored. The parent is snapshotted first so subscribers still see it.
    """
    require_fields(raw, REPLY_REQUIRED)
    parent_id = str(raw["parent_comment_id"])

    reply = Comment(
        user_id=str(raw["user_id"]),
        name=raw.get("user_name"),
        comment=str(raw["reply_text"]),
        comment_id=generate_reply_id(),
        post_id=str(raw["post_id"]),
        action_type="REPLY",
        parent_comment_id=parent_id,
        reply_to=parent_id,
        extra={},
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    logger.info("Reply posted to comment %s", parent_id)

    result = ReplyResult(reply=reply)
    if raw.get("delete_after_reply"):
        parent = db.query(Comment).filter(Comment.comment_id == parent_id).first()
        if parent:
            result.deleted_parent = serialize_comment(parent)
            db.delete(parent)
            db.commit()
            result.parent_deleted = True
            logger.info("Deleted parent comment %s after reply", parent_id)
        else:
            result.notes.append(f"Parent comment {parent_id} not found")
    return result


def reply_payload(result: ReplyResult, delete_after_reply: bool) -> Dict[str, Any]:
    return {
        **serialize_comment(result.reply),
        "webhook_type": "COMMENT_REPLY",
        "action": "REPLY",
        "parent_comment_id": result.reply.parent_comment_id,
        "delete_after_reply": delete_after_reply,
        "timestamp": _now_iso(),
    }


def reply_parent_deleted_payload(result: ReplyResult, deleted_by: str) -> Dict[str, Any]:
    return {
        "action": "DELETE_AFTER_REPLY",
        "webhook_type": "COMMENT_DELETED",
        "comment_id": result.reply.parent_comment_id,
        "deleted_comment": result.deleted_parent,
        "reason": "Deleted after admin reply",
        "deleted_by": deleted_by,
        "reply_id": result.reply.comment_id,
        "timestamp": _now_iso(),
    }


def delete_comment(db: Session, comment_id: str, delete_option: str, deleted_by: str) -> Dict[str, Any]:
    """
    Admin deletion of a comment.

    "platform" only notifies subscribers (they remove it upstream); "database"
    and "both" also drop the stored row. Returns the webhook payload.
    """
    comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")

    payload = {
        "action": "DELETE",
        "webhook_type": "COMMENT_DELETED",
        "comment_id": comment_id,
        "delete_option": delete_option,
        "comment_data": serialize_comment(comment),
        "deleted_by": deleted_by,
        "timestamp": _now_iso(),
    }

    if delete_option in ("database", "both"):
        db.delete(comment)
        db.commit()
        logger.info("Comment %s deleted from database", comment_id)
    return payload


def find_comments(
    db: Session,
    user_id: Optional[str] = None,
    post_id: Optional[str] = None,
    comment_id: Optional[str] = None,
    action_type: Optional[str] = None,
    custom_action: Optional[str] = None,
    parent_comment_id: Optional[str] = None,
) -> List[Comment]:
    query = db.query(Comment)
    if user_id:
        query = query.filter(Comment.user_id == user_id)
    if post_id:
        query = query.filter(Comment.post_id == post_id)
    if comment_id:
        query = query.filter(Comment.comment_id == comment_id)
    if action_type:
        query = query.filter(Comment.action_type.ilike(f"%{action_type}%"))
    if custom_action:
        query = query.filter(Comment.custom_action.ilike(f"%{custom_action}%"))
    if parent_comment_id:
        query = query.filter(Comment.parent_comment_id == parent_comment_id)
    return query.order_by(Comment.created_at.desc()).all()


def comment_stats(db: Session) -> Dict[str, Any]:
    total = db.query(func.count(Comment.id)).scalar() or 0
    replies = db.query(func.count(Comment.id)).filter(Comment.parent_comment_id.isnot(None)).scalar() or 0

    top_users = db.query(
        Comment.user_id, func.max(Comment.name), func.count(Comment.id)
    ).group_by(Comment.user_id).order_by(func.count(Comment.id).desc()).limit(10).all()

    top_posts = db.query(
        Comment.post_id, func.max(Comment.post_link), func.count(Comment.id)
    ).group_by(Comment.post_id).order_by(func.count(Comment.id).desc()).limit(10).all()

    return {
        "totalComments": total,
        "totalReplies": replies,
        "topUsers": [{"user_id": u, "name": n, "count": c} for u, n, c in top_users],
        "topPosts": [{"post_id": p, "post_link": link, "count": c} for p, link, c in top_posts],
    }

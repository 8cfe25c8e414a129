"""
Comment ingress, admin replies and moderation.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.comment import Comment
from app.models.webhook import WebhookType
from app.schemas.common import Pagination
from app.schemas.comments import CommentIngress, ReplyRequest, DeleteCommentRequest
from app.auth.dependencies import require_auth
from app.services import realtime
from app.services import reconciliation as rec
from app.services.notifications import publish_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Comments"])


def _listing(comments) -> Dict[str, Any]:
    return {"success": True, "count": len(comments), "data": [rec.serialize_comment(c) for c in comments]}


@router.post("/save-comment", status_code=status.HTTP_201_CREATED)
def save_comment(body: CommentIngress, db: Session = Depends(get_db)):
    """Record a comment, or erase matching comments when action_type is a removal"""
    result = rec.save_comment(db, body.model_dump())

    if result.removed:
        publish_event(
            db,
            WebhookType.COMMENT,
            rec.removal_payload(result, "COMMENT_REMOVED"),
            realtime.COMMENT_REMOVED,
            {**result.key, "verb": result.action.verb, "deleted_count": result.deleted_count},
        )
        return rec.removal_summary(result, "Comment")

    publish_event(
        db,
        WebhookType.COMMENT,
        rec.comment_added_payload(result),
        realtime.NEW_COMMENT,
        result.data,
    )
    return {
        "success": True,
        "message": f"Comment data saved successfully. Action: {result.action.action_type}",
        "data": result.data,
    }


@router.post("/reply-comment", status_code=status.HTTP_201_CREATED)
def reply_comment(
    body: ReplyRequest,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    result = rec.create_reply(db, body.model_dump())
    reply = rec.serialize_comment(result.reply)

    publish_event(
        db,
        WebhookType.COMMENT,
        rec.reply_payload(result, body.delete_after_reply),
        realtime.NEW_REPLY,
        reply,
    )
    if result.parent_deleted:
        publish_event(
            db,
            WebhookType.COMMENT,
            rec.reply_parent_deleted_payload(result, current_admin["username"]),
            realtime.COMMENT_DELETED,
            {"comment_id": result.reply.parent_comment_id, "delete_option": "database"},
        )

    return {
        "success": True,
        "message": "Reply posted successfully",
        "data": reply,
        "parent_deleted": result.parent_deleted,
    }


@router.get("/all-comments")
def all_comments(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    total = db.query(Comment).count()
    comments = db.query(Comment).order_by(Comment.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "success": True,
        "count": total,
        "data": [rec.serialize_comment(c) for c in comments],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/comment-stats")
def comment_stats(
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    return {"success": True, "stats": rec.comment_stats(db)}


@router.delete("/delete-comment/{comment_id}")
def delete_comment(
    comment_id: str,
    body: DeleteCommentRequest,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    """
    Moderate a comment.

    database: drop the stored row. platform: only tell subscribers so they
    remove it upstream. both: do both. Subscribers are notified in every case.
    """
    payload = rec.delete_comment(db, comment_id, body.delete_option, current_admin["username"])
    publish_event(
        db,
        WebhookType.COMMENT,
        payload,
        realtime.COMMENT_DELETED,
        {"comment_id": comment_id, "delete_option": body.delete_option},
    )
    return {
        "success": True,
        "message": "Comment deleted successfully",
        "delete_option": body.delete_option,
    }


@router.get("/find-comments")
def find_comments(
    user_id: Optional[str] = None,
    post_id: Optional[str] = None,
    comment_id: Optional[str] = None,
    action_type: Optional[str] = None,
    custom_action: Optional[str] = None,
    parent_comment_id: Optional[str] = None,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    return _listing(rec.find_comments(
        db,
        user_id=user_id,
        post_id=post_id,
        comment_id=comment_id,
        action_type=action_type,
        custom_action=custom_action,
        parent_comment_id=parent_comment_id,
    ))


@router.get("/user-comments/{user_id}")
def user_comments(user_id: str, db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    return _listing(rec.find_comments(db, user_id=user_id))


@router.get("/post-comments/{post_id}")
def post_comments(post_id: str, db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    return _listing(rec.find_comments(db, post_id=post_id))


@router.get("/comment-replies/{parent_comment_id}")
def comment_replies(
    parent_comment_id: str,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    return _listing(rec.find_comments(db, parent_comment_id=parent_comment_id))

"""Cross-entity statistics and health."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.comment import Comment
from app.models.order import Order, OrderStatus
from app.models.reaction import Reaction
from app.models.user_ban import UserBan
from app.models.webhook import WebhookConfig
from app.auth.dependencies import require_auth
from app.services.orders import serialize_order
from app.services.reconciliation import serialize_comment, serialize_reaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Stats"])


def _grouped(db: Session, column, model) -> list:
    rows = db.query(column, func.count(model.id)).group_by(column).all()
    return [{"value": getattr(v, "value", v), "count": c} for v, c in rows]


def _distinct_custom_actions(db: Session, model) -> list:
    rows = db.query(model.custom_action).filter(
        model.custom_action.isnot(None),
        model.custom_action != "",
    ).distinct().all()
    return sorted(r[0] for r in rows)


def _distinct_action_types(db: Session, model) -> list:
    return sorted(r[0] for r in db.query(model.action_type).distinct().all())


@router.get("/stats")
def stats(db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    latest_reaction = db.query(Reaction).order_by(Reaction.created_at.desc()).first()
    latest_comment = db.query(Comment).order_by(Comment.created_at.desc()).first()
    latest_order = db.query(Order).order_by(Order.created_at.desc()).first()

    return {
        "success": True,
        "stats": {
            "totalReactions": db.query(Reaction).count(),
            "totalComments": db.query(Comment).count(),
            "totalOrders": db.query(Order).count(),
            "reactionsByType": _grouped(db, Reaction.reaction_type, Reaction),
            "reactionActionsByType": _grouped(db, Reaction.action_type, Reaction),
            "commentActionsByType": _grouped(db, Comment.action_type, Comment),
            "ordersByStatus": _grouped(db, Order.status, Order),
            "uniqueReactionActions": _distinct_custom_actions(db, Reaction),
            "uniqueCommentActions": _distinct_custom_actions(db, Comment),
            "latestReaction": serialize_reaction(latest_reaction) if latest_reaction else None,
            "latestComment": serialize_comment(latest_comment) if latest_comment else None,
            "latestOrder": serialize_order(latest_order) if latest_order else None,
        },
    }


@router.get("/action-types")
def action_types(db: Session = Depends(get_db)):
    """Every action_type and custom_action seen so far (public, used by automations)"""
    return {
        "success": True,
        "reaction_actions": _distinct_action_types(db, Reaction),
        "comment_actions": _distinct_action_types(db, Comment),
        "reaction_custom_actions": _distinct_custom_actions(db, Reaction),
        "comment_custom_actions": _distinct_custom_actions(db, Comment),
    }


@router.get("/dashboard-stats")
def dashboard_stats(db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    recent_reactions = db.query(Reaction).order_by(Reaction.created_at.desc()).limit(5).all()
    recent_comments = db.query(Comment).order_by(Comment.created_at.desc()).limit(5).all()
    recent_orders = db.query(Order).order_by(Order.created_at.desc()).limit(5).all()

    return {
        "success": True,
        "stats": {
            "totalReactions": db.query(Reaction).count(),
            "totalComments": db.query(Comment).count(),
            "totalOrders": db.query(Order).count(),
            "pendingOrders": db.query(Order).filter(Order.status == OrderStatus.PENDING).count(),
            "webhookCount": db.query(WebhookConfig).filter(WebhookConfig.is_active.is_(True)).count(),
            "bannedUsersCount": db.query(UserBan).filter(UserBan.is_active.is_(True)).count(),
            "recentReactions": [serialize_reaction(r) for r in recent_reactions],
            "recentComments": [serialize_comment(c) for c in recent_comments],
            "recentOrders": [serialize_order(o) for o in recent_orders],
        },
    }


@router.get("/health")
def api_health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = {"connected": True}
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        database = {"connected": False, "error": str(e)}

    return {
        "success": True,
        "message": "SocialHub API is running.",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
    }

"""
Reaction ingress and queries.

POST /api/save-reaction is public: it is called by the automation that
watches the social platform. Everything else needs a dashboard session.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.reaction import Reaction
from app.models.webhook import WebhookType
from app.schemas.common import Pagination
from app.schemas.reactions import ReactionIngress
from app.auth.dependencies import require_auth
from app.services import realtime
from app.services import reconciliation as rec
from app.services.notifications import publish_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reactions"])


@router.post("/save-reaction", status_code=status.HTTP_201_CREATED)
def save_reaction(body: ReactionIngress, db: Session = Depends(get_db)):
    """Record a reaction, or erase matching reactions when action_type is a removal"""
    result = rec.save_reaction(db, body.model_dump())

    if result.removed:
        publish_event(
            db,
            WebhookType.REACTION,
            rec.removal_payload(result, "REACTION_REMOVED"),
            realtime.REACTION_REMOVED,
            {**result.key, "verb": result.action.verb, "deleted_count": result.deleted_count},
        )
        return rec.removal_summary(result, "Reaction")

    publish_event(
        db,
        WebhookType.REACTION,
        rec.reaction_added_payload(result),
        realtime.NEW_REACTION,
        result.data,
    )
    return {
        "success": True,
        "message": f"Reaction data saved successfully. Action: {result.action.action_type}",
        "data": result.data,
    }


@router.get("/all-reactions")
def all_reactions(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    total = db.query(Reaction).count()
    reactions = db.query(Reaction).order_by(Reaction.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "success": True,
        "count": total,
        "data": [rec.serialize_reaction(r) for r in reactions],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/reaction-stats")
def reaction_stats(
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    return {"success": True, "stats": rec.reaction_stats(db)}


@router.get("/find-reactions")
def find_reactions(
    user_id: Optional[str] = None,
    reaction_type: Optional[str] = None,
    action_type: Optional[str] = None,
    post_id: Optional[str] = None,
    custom_action: Optional[str] = None,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    reactions = rec.find_reactions(
        db,
        user_id=user_id,
        reaction_type=reaction_type,
        action_type=action_type,
        post_id=post_id,
        custom_action=custom_action,
    )
    return {"success": True, "count": len(reactions), "data": [rec.serialize_reaction(r) for r in reactions]}


@router.get("/user-reactions/{user_id}")
def user_reactions(
    user_id: str,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    reactions = rec.find_reactions(db, user_id=user_id)
    return {"success": True, "count": len(reactions), "data": [rec.serialize_reaction(r) for r in reactions]}


@router.get("/current-reaction/{user_id}/{post_id}")
def current_reaction(
    user_id: str,
    post_id: str,
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    return rec.current_reaction(db, user_id, post_id)

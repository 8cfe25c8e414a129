"""
User bans and data removal.

Banning never deletes anything. When a ban conflicts, the 409 response
carries can_remove_data so the dashboard can offer remove-user-data.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.webhook import WebhookType
from app.schemas.bans import BanCreate, BanResponse, RemoveUserDataRequest
from app.schemas.common import Pagination
from app.auth.dependencies import require_auth
from app.services import bans as ban_service
from app.services import realtime
from app.services.activity import log_activity
from app.services.notifications import publish_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bans"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/ban-user", status_code=status.HTTP_201_CREATED)
def ban_user(
    body: BanCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    ban = ban_service.create_ban(db, body.model_dump())
    data = BanResponse.model_validate(ban).model_dump(mode="json")

    log_activity(
        db, current_admin["username"], "USER_BANNED",
        {"user_id": ban.user_id, "user_name": ban.user_name, "ban_type": ban.ban_type.value, "reason": ban.reason},
        request,
    )
    db.commit()

    publish_event(
        db,
        WebhookType.USER_BAN,
        {
            "action_type": "BAN",
            "webhook_type": "USER_BANNED",
            "action": "USER_BANNED",
            "user_id": ban.user_id,
            "user_name": ban.user_name,
            "ban_type": ban.ban_type.value,
            "reason": ban.reason,
            "banned_by": ban.banned_by,
            "ban_id": ban.id,
            "timestamp": _now_iso(),
        },
        realtime.USER_BANNED,
        data,
    )
    return {"success": True, "message": "User banned successfully", "data": data}


@router.get("/banned-users")
def banned_users(
    filter_type: Optional[str] = Query(None),
    filter_type_camel: Optional[str] = Query(None, alias="filterType"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: Dict[str, Any] = Depends(require_auth),
):
    bans, total = ban_service.list_bans(db, filter_type or filter_type_camel or "ALL", page, limit)
    return {
        "success": True,
        "data": [BanResponse.model_validate(b) for b in bans],
        "pagination": Pagination.build(page, limit, total),
    }


@router.put("/unban-user/{user_id}")
def unban_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    ban = ban_service.unban(db, user_id)
    data = BanResponse.model_validate(ban).model_dump(mode="json")

    log_activity(
        db, current_admin["username"], "USER_UNBANNED",
        {"user_id": user_id, "user_name": ban.user_name, "ban_type": ban.ban_type.value},
        request,
    )
    db.commit()

    publish_event(
        db,
        WebhookType.USER_BAN,
        {
            "action_type": "UNBAN",
            "webhook_type": "USER_UNBANNED",
            "action": "USER_UNBANNED",
            "user_id": user_id,
            "user_name": ban.user_name,
            "ban_type": ban.ban_type.value,
            "reason": ban.reason,
            "unbanned_by": current_admin["username"],
            "timestamp": _now_iso(),
        },
        realtime.USER_UNBANNED,
        {"user_id": user_id, "user_name": ban.user_name},
    )
    return {"success": True, "message": "User unbanned successfully", "data": data}


@router.delete("/remove-user-data/{user_id}")
def remove_user_data(
    user_id: str,
    request: Request,
    body: Optional[RemoveUserDataRequest] = Body(None),
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    """Erase every reaction, comment and order tied to user_id"""
    body = body or RemoveUserDataRequest()
    counts = ban_service.remove_user_data(db, user_id)
    deleted_counts = counts.as_dict()

    log_activity(
        db, current_admin["username"], "USER_DATA_REMOVED",
        {"user_id": user_id, "removed_reason": body.remove_reason, "deleted_counts": deleted_counts},
        request,
    )
    db.commit()

    publish_event(
        db,
        WebhookType.USER_BAN,
        {
            "action_type": "REMOVE_ALL_DATA",
            "webhook_type": "USER_DATA_REMOVED",
            "action": "REMOVE_ALL_DATA",
            "user_id": user_id,
            "removed_by": body.removed_by or current_admin["username"],
            "remove_reason": body.remove_reason or "User data cleanup",
            "deleted_counts": deleted_counts,
            "total_removed": counts.total,
            "timestamp": _now_iso(),
        },
        realtime.USER_DATA_REMOVED,
        {"user_id": user_id, "deleted_counts": deleted_counts},
    )
    return {
        "success": True,
        "message": f"All data removed for user {user_id}",
        "deleted_counts": deleted_counts,
        "total_removed": counts.total,
    }


@router.get("/ban-stats")
def ban_stats(db: Session = Depends(get_db), _: Dict[str, Any] = Depends(require_auth)):
    return {"success": True, "stats": ban_service.ban_stats(db)}


@router.delete("/cleanup-old-data")
def cleanup_old_data(
    request: Request,
    db: Session = Depends(get_db),
    current_admin: Dict[str, Any] = Depends(require_auth),
):
    result = ban_service.cleanup_old_data(db)

    log_activity(
        db, current_admin["username"], "DATA_CLEANUP",
        {"deleted_reactions": result.deleted_reactions, "deleted_comments": result.deleted_comments},
        request,
    )
    db.commit()

    publish_event(
        db,
        WebhookType.DATA_CLEANUP,
        {
            "action": "DATA_CLEANUP",
            "webhook_type": "DATA_CLEANUP",
            "deleted_reactions": result.deleted_reactions,
            "deleted_comments": result.deleted_comments,
            "total_deleted": result.total,
            "cleanup_date": result.cutoff.isoformat(),
            "triggered_by": current_admin["username"],
            "timestamp": _now_iso(),
        },
        realtime.DATA_CLEANUP,
        {"deleted_reactions": result.deleted_reactions, "deleted_comments": result.deleted_comments},
    )
    return {
        "success": True,
        "message": "Old data cleaned successfully",
        "data": {
            "deleted_reactions": result.deleted_reactions,
            "deleted_comments": result.deleted_comments,
        },
    }

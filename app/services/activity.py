import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from app.models.admin_activity import AdminActivity

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    admin_username: str,
    action: str,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> AdminActivity:
    """Append an admin action to the activity log. The caller commits."""
    activity = AdminActivity(
        admin_username=admin_username,
        action=action,
        details=details or {},
        ip_address=request.client.host if request is not None and request.client else None,
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
    db.add(activity)
    logger.info("Activity logged: %s - %s", admin_username, action)
    return activity

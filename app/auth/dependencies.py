from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.sessions import SessionStore, get_session_store, session_ttl_seconds
from app.models.admin import AdminRole

security = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Resolve the session behind the bearer token and slide its expiry"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials
    session = store.get(token)
    if session is None:
        store.delete(token)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please login again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    store.expire(token, session_ttl_seconds())
    return session["admin"]


def require_role(*allowed_roles: AdminRole):
    """Factory to create role-based access control dependency"""

    async def role_checker(current_admin: Dict[str, Any] = Depends(get_current_admin)) -> Dict[str, Any]:
        if current_admin.get("role") not in [r.value for r in allowed_roles]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Owner privileges required."
                if allowed_roles == (AdminRole.OWNER,)
                else f"Access denied. Required roles: {', '.join(r.value for r in allowed_roles)}",
            )
        return current_admin
    return role_checker


# Convenience dependencies for common role checks
require_auth = require_role(AdminRole.OWNER, AdminRole.ADMIN)
require_owner = require_role(AdminRole.OWNER)

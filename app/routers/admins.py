from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ConflictError
from app.models.admin import Admin, AdminRole
from app.models.admin_activity import AdminActivity
from app.schemas.admins import (
    AdminCreate,
    AdminResponse,
    AdminListResponse,
    ActivityResponse,
    ActivityListResponse,
)
from app.schemas.common import Pagination
from app.auth.dependencies import require_owner
from app.auth.security import hash_password
from app.auth.sessions import SessionStore, get_session_store
from app.services.activity import log_activity

router = APIRouter(prefix="/api/admins", tags=["Admin Management"])


def _get_managed_admin(db: Session, username: str, action: str) -> Admin:
    admin = db.query(Admin).filter(Admin.username == username).first()
    if not admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
    if admin.role == AdminRole.OWNER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot {action} owner account"
        )
    return admin


@router.get("", response_model=AdminListResponse)
def list_admins(
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
):
    """List ADMIN accounts (the owner is not listed)"""
    admins = db.query(Admin).filter(Admin.role == AdminRole.ADMIN).order_by(Admin.created_at.desc()).all()
    return AdminListResponse(data=[AdminResponse.model_validate(a) for a in admins])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_admin(
    body: AdminCreate,
    request: Request,
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
):
    if db.query(Admin).filter(Admin.username == body.username).first():
        raise ConflictError("Username already exists")

    admin = Admin(
        username=body.username,
        password_hash=hash_password(body.password),
        role=AdminRole.ADMIN,
        is_active=True,
        created_by=current_admin["username"],
    )
    db.add(admin)
    log_activity(db, current_admin["username"], "ADMIN_CREATED", {"new_admin": body.username}, request)
    db.commit()
    db.refresh(admin)

    return {
        "success": True,
        "message": "Admin created successfully",
        "data": AdminResponse.model_validate(admin),
    }


@router.delete("/{username}")
def delete_admin(
    username: str,
    request: Request,
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    admin = _get_managed_admin(db, username, "delete")

    db.delete(admin)
    log_activity(db, current_admin["username"], "ADMIN_DELETED", {"deleted_admin": username}, request)
    db.commit()
    store.delete_for_admin(username)

    return {"success": True, "message": "Admin deleted successfully"}


@router.put("/{username}/toggle")
def toggle_admin(
    username: str,
    request: Request,
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Activate or deactivate an admin. Deactivation closes their sessions."""
    admin = _get_managed_admin(db, username, "modify")

    admin.is_active = not admin.is_active
    log_activity(
        db, current_admin["username"], "ADMIN_STATUS_TOGGLED",
        {"target_admin": username, "new_status": "active" if admin.is_active else "inactive"},
        request,
    )
    db.commit()
    if not admin.is_active:
        store.delete_for_admin(username)

    return {
        "success": True,
        "message": f"Admin {'activated' if admin.is_active else 'deactivated'} successfully",
        "data": {"username": admin.username, "is_active": admin.is_active},
    }


def _activity_page(query, page: int, limit: int) -> ActivityListResponse:
    total = query.count()
    activities = query.order_by(AdminActivity.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return ActivityListResponse(
        data=[ActivityResponse.model_validate(a) for a in activities],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/activities", response_model=ActivityListResponse)
def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
):
    return _activity_page(db.query(AdminActivity), page, limit)


@router.get("/activities/{username}", response_model=ActivityListResponse)
def list_admin_activities(
    username: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    current_admin: Dict[str, Any] = Depends(require_owner),
    db: Session = Depends(get_db),
):
    return _activity_page(
        db.query(AdminActivity).filter(AdminActivity.admin_username == username), page, limit
    )

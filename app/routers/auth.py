from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.admin import Admin, AdminRole
from app.models.base import utcnow
from app.schemas.auth import (
    AdminIdentity,
    AdminProfile,
    ChangePasswordRequest,
    Credentials,
    LoginResponse,
    SetupStatus,
)
from app.auth.security import hash_password, verify_password, generate_session_token
from app.auth.sessions import SessionStore, get_session_store, session_ttl_seconds
from app.auth.dependencies import require_auth, security
from app.auth.rate_limiter import rate_limiter
from app.services.activity import log_activity

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.get("/check-setup", response_model=SetupStatus)
def check_setup(db: Session = Depends(get_db)):
    """Whether the first (owner) account still has to be created"""
    admin_count = db.query(Admin).count()
    owner = db.query(Admin).filter(Admin.role == AdminRole.OWNER).first()
    return SetupStatus(needs_setup=admin_count == 0, owner_exists=owner is not None)


@router.post("/setup-owner", status_code=status.HTTP_201_CREATED)
def setup_owner(credentials: Credentials, request: Request, db: Session = Depends(get_db)):
    """Create the owner account. Only allowed while no admin exists."""
    if db.query(Admin).count() > 0:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Setup already completed. Login instead."
        )

    owner = Admin(
        username=credentials.username,
        password_hash=hash_password(credentials.password),
        role=AdminRole.OWNER,
        is_active=True,
    )
    db.add(owner)
    log_activity(db, credentials.username, "OWNER_ACCOUNT_CREATED", {"is_initial_setup": True}, request)
    db.commit()

    return {"success": True, "message": "Owner account created successfully. Please login."}


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: Credentials,
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Authenticate an admin and open a session"""
    if rate_limiter.is_blocked(credentials.username):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many failed attempts. Please try again in {rate_limiter.window_minutes} minutes."
        )

    admin = db.query(Admin).filter(
        Admin.username == credentials.username,
        Admin.is_active.is_(True),
    ).first()

    if admin is None or not verify_password(credentials.password, admin.password_hash):
        reason = "User not found" if admin is None else "Invalid password"
        log_activity(db, credentials.username, "LOGIN_FAILED", {"reason": reason}, request)
        db.commit()
        attempts = rate_limiter.record_failed_attempt(credentials.username)
        remaining = rate_limiter.max_attempts - attempts
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"X-Remaining-Attempts": str(max(0, remaining))}
        )

    rate_limiter.reset(credentials.username)

    token = generate_session_token()
    role = admin.role.value
    store.set(
        token,
        {"admin": {"id": admin.id, "username": admin.username, "role": role}},
        session_ttl_seconds(),
    )

    admin.last_login = utcnow()
    log_activity(db, admin.username, "LOGIN_SUCCESS", {"role": role}, request)
    db.commit()

    return LoginResponse(token=token, admin=AdminIdentity(username=admin.username, role=role))


@router.post("/logout")
def logout(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_admin: Dict[str, Any] = Depends(require_auth),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    store.delete(credentials.credentials)
    log_activity(db, current_admin["username"], "LOGOUT", {}, request)
    db.commit()
    return {"success": True, "message": "Logged out successfully"}


@router.get("/verify")
def verify(current_admin: Dict[str, Any] = Depends(require_auth)):
    return {
        "success": True,
        "admin": AdminIdentity(username=current_admin["username"], role=current_admin["role"]),
    }


@router.get("/me")
def me(current_admin: Dict[str, Any] = Depends(require_auth), db: Session = Depends(get_db)):
    admin = db.query(Admin).filter(Admin.id == current_admin["id"]).first()
    if not admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")

    return {
        "success": True,
        "admin": AdminProfile(
            username=admin.username,
            role=admin.role.value,
            created_at=admin.created_at,
            last_login=admin.last_login,
        ),
    }


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    request: Request,
    current_admin: Dict[str, Any] = Depends(require_auth),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Change own password. Every session of the admin is closed afterwards."""
    admin = db.query(Admin).filter(Admin.id == current_admin["id"]).first()
    if not admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")

    if not verify_password(body.current_password, admin.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect"
        )

    admin.password_hash = hash_password(body.new_password)
    log_activity(db, admin.username, "PASSWORD_CHANGED", {}, request)
    db.commit()
    store.delete_for_admin(admin.username)

    return {"success": True, "message": "Password changed successfully. Please login again."}

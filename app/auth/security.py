import base64
import hashlib
import secrets

import bcrypt as _bcrypt

from app.config import settings


def _prehash(password: str) -> bytes:
    """SHA-256 prehash → 44 bytes base64, keeps any password within bcrypt's 72-byte limit."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash password using salted bcrypt."""
    salt = _bcrypt.gensalt(rounds=settings.bcrypt_cost_factor)
    return _bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return _bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def generate_session_token() -> str:
    """Opaque 64-char hex session token"""
    return secrets.token_hex(32)

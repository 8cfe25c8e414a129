"""
Session storage for dashboard logins.

Sessions are opaque tokens mapped to {"admin": {...}, "expires_at": epoch}.
Every authenticated request slides expiry forward by the configured TTL.
The store is injected through get_session_store() so a process-local map can
be swapped for Redis when the API runs on more than one process.
"""
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from app.config import settings

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """get / set / delete / expire over session tokens"""

    @abstractmethod
    def get(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the session, or None when missing or expired."""

    @abstractmethod
    def set(self, token: str, session: Dict[str, Any], ttl_seconds: int) -> None:
        pass

    @abstractmethod
    def delete(self, token: str) -> None:
        pass

    @abstractmethod
    def expire(self, token: str, ttl_seconds: int) -> bool:
        """Push the token's expiry to now + ttl. Returns False if the token is gone."""

    @abstractmethod
    def delete_for_admin(self, username: str) -> int:
        """Drop every session belonging to username. Returns how many were removed."""


class InMemorySessionStore(SessionStore):
    """Process-local store. A restart invalidates every session."""

    def __init__(self):
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session["expires_at"] < time.time():
                del self._sessions[token]
                return None
            return session

    def set(self, token: str, session: Dict[str, Any], ttl_seconds: int) -> None:
        with self._lock:
            self._sessions[token] = {**session, "expires_at": time.time() + ttl_seconds}

    def delete(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def expire(self, token: str, ttl_seconds: int) -> bool:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return False
            session["expires_at"] = time.time() + ttl_seconds
            return True

    def delete_for_admin(self, username: str) -> int:
        with self._lock:
            tokens = [
                t for t, s in self._sessions.items()
                if s.get("admin", {}).get("username") == username
            ]
            for t in tokens:
                del self._sessions[t]
            return len(tokens)


class RedisSessionStore(SessionStore):
    """Redis-backed store. Expiry is delegated to Redis key TTLs."""

    def __init__(self, redis_client=None):
        if redis_client is None:
            from app.redis_client import get_redis_client
            redis_client = get_redis_client()
        self.redis = redis_client

    def _key(self, token: str) -> str:
        return f"session:{token}"

    def _admin_key(self, username: str) -> str:
        return f"session_admin:{username}"

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        raw = self.redis.get(self._key(token))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, token: str, session: Dict[str, Any], ttl_seconds: int) -> None:
        data = {**session, "expires_at": time.time() + ttl_seconds}
        pipe = self.redis.pipeline()
        pipe.setex(self._key(token), ttl_seconds, json.dumps(data, default=str))
        username = session.get("admin", {}).get("username")
        if username:
            pipe.sadd(self._admin_key(username), token)
            pipe.expire(self._admin_key(username), ttl_seconds)
        pipe.execute()

    def delete(self, token: str) -> None:
        raw = self.redis.get(self._key(token))
        pipe = self.redis.pipeline()
        pipe.delete(self._key(token))
        if raw is not None:
            username = json.loads(raw).get("admin", {}).get("username")
            if username:
                pipe.srem(self._admin_key(username), token)
        pipe.execute()

    def expire(self, token: str, ttl_seconds: int) -> bool:
        if not self.redis.expire(self._key(token), ttl_seconds):
            return False
        # The admin index lives as long as its newest session
        username = (self.get(token) or {}).get("admin", {}).get("username")
        if username:
            self.redis.expire(self._admin_key(username), ttl_seconds)
        return True

    def delete_for_admin(self, username: str) -> int:
        tokens = self.redis.smembers(self._admin_key(username)) or set()
        removed = 0
        for token in tokens:
            removed += self.redis.delete(self._key(token))
        self.redis.delete(self._admin_key(username))
        return removed


_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Return the configured session store (created on first use)"""
    global _store
    if _store is None:
        if settings.session_backend == "redis":
            _store = RedisSessionStore()
        else:
            _store = InMemorySessionStore()
        logger.info("Session store initialised: %s", type(_store).__name__)
    return _store


def session_ttl_seconds() -> int:
    return settings.session_ttl_hours * 60 * 60

"""
Application error hierarchy.

Each error carries the HTTP status it maps to plus any extra context the
caller needs to decide a follow-up. main.py renders them as
{"success": false, "message": ..., **context}.
"""
from typing import Any, Dict, Iterable, Optional


class SocialHubError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, **context: Any):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context: Dict[str, Any] = context
        super().__init__(self.message)


class ValidationFailed(SocialHubError):
    status_code = 400


class MissingFieldsError(ValidationFailed):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields: {', '.join(self.fields)}",
            missing_fields=self.fields,
        )


class NotFoundError(SocialHubError):
    status_code = 404


class ConflictError(SocialHubError):
    status_code = 409


class BanConflictError(ConflictError):
    """Raised when a user already has an active ban."""

    def __init__(self, existing_ban: Dict[str, Any]):
        super().__init__(
            "This user is already banned",
            existing_ban=existing_ban,
            can_remove_data=True,
        )

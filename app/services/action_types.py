"""
Action-type parsing for reaction and comment ingress.

Inbound events carry a free-text action_type. It is parsed once, at the API
boundary, into an ActionKind:

    absent / blank          -> ADD, stored as "ADDED"
    contains REMOVE/DELETE  -> REMOVE, verb DELETED or REMOVED
    exactly REPLY           -> REPLY
    anything else           -> ADD, stored verbatim (uppercased)

Mandatory identity fields must be checked with require_fields() before
parse_action_type() is called.
"""
import enum
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from app.exceptions import MissingFieldsError, ValidationFailed

DEFAULT_ACTION = "ADDED"
REPLY_ACTION = "REPLY"

REMOVAL_PATTERN = re.compile(r"REMOVE|DELETE", re.IGNORECASE)
DELETE_PATTERN = re.compile(r"DELETE", re.IGNORECASE)


class ActionKind(str, enum.Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    REPLY = "REPLY"


@dataclass(frozen=True)
class ClassifiedAction:
    kind: ActionKind
    action_type: str
    # Only set for removals: DELETED or REMOVED, used in the delivered webhook
    verb: Optional[str] = None

    @property
    def is_removal(self) -> bool:
        return self.kind == ActionKind.REMOVE


def is_removal_action(action_type: Optional[str]) -> bool:
    return bool(action_type) and REMOVAL_PATTERN.search(action_type) is not None


def parse_action_type(raw: Any) -> ClassifiedAction:
    if raw is None:
        return ClassifiedAction(ActionKind.ADD, DEFAULT_ACTION)
    if not isinstance(raw, str):
        raise ValidationFailed("action_type must be a string", field="action_type")

    normalized = raw.strip().upper()
    if not normalized:
        return ClassifiedAction(ActionKind.ADD, DEFAULT_ACTION)

    if is_removal_action(normalized):
        verb = "DELETED" if DELETE_PATTERN.search(normalized) else "REMOVED"
        return ClassifiedAction(ActionKind.REMOVE, normalized, verb)

    if normalized == REPLY_ACTION:
        return ClassifiedAction(ActionKind.REPLY, normalized)

    return ClassifiedAction(ActionKind.ADD, normalized)


def require_fields(payload: Dict[str, Any], fields: Iterable[str]) -> None:
    """Raise MissingFieldsError naming every field that is absent or blank."""
    missing = [
        f for f in fields
        if payload.get(f) is None or (isinstance(payload.get(f), str) and not payload[f].strip())
    ]
    if missing:
        raise MissingFieldsError(missing)

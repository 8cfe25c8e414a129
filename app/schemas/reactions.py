from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Any, Dict

from app.models.reaction import ReactionType
from app.schemas.common import IdentifierModel


class ReactionIngress(IdentifierModel):
    """Raw reaction event. Mandatory fields are checked by the classifier so the
    400 response can name what is missing; unknown keys are kept."""
    user_id: Optional[str] = None
    reaction_type: Optional[str] = None
    name: Optional[str] = None
    post_id: Optional[str] = None
    post_url: Optional[str] = None
    action_type: Optional[Any] = None
    previous_reaction: Optional[str] = None
    custom_action: Optional[Any] = None

    class Config:
        extra = "allow"


class ReactionResponse(BaseModel):
    id: int
    name: Optional[str] = None
    user_id: str
    reaction_type: ReactionType
    post_url: Optional[str] = None
    post_id: Optional[str] = None
    action_type: str
    previous_reaction: Optional[str] = None
    custom_action: Optional[str] = None
    extra: Dict[str, Any] = {}
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

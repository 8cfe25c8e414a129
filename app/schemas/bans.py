from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Any

from app.models.user_ban import BanType
from app.schemas.common import IdentifierModel


class BanCreate(IdentifierModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    ban_type: Optional[Any] = None
    reason: Optional[str] = None
    banned_by: Optional[str] = None


class RemoveUserDataRequest(BaseModel):
    remove_reason: Optional[str] = None
    removed_by: Optional[str] = None


class BanResponse(BaseModel):
    id: int
    user_id: str
    user_name: Optional[str] = None
    ban_type: BanType
    reason: Optional[str] = None
    banned_by: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

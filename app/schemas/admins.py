from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Any, Dict, List

from app.models.admin import AdminRole
from app.schemas.common import Pagination


class AdminCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=6)


class AdminResponse(BaseModel):
    id: int
    username: str
    role: AdminRole
    is_active: bool
    created_by: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AdminListResponse(BaseModel):
    success: bool = True
    data: List[AdminResponse]


class ActivityResponse(BaseModel):
    id: int
    admin_username: str
    action: str
    details: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    success: bool = True
    data: List[ActivityResponse]
    pagination: Pagination

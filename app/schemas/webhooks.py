from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, Dict, List

from app.models.webhook import WebhookType


def ascii_headers(headers: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    """HTTP header names and values are sent as ASCII"""
    for key, value in (headers or {}).items():
        if not (key.isascii() and value.isascii()):
            raise ValueError(f"Header {key!r} must contain only ASCII characters")
    return headers


class WebhookCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    type: WebhookType
    headers: Dict[str, str] = {}
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("headers")
    @classmethod
    def headers_are_ascii(cls, value):
        return ascii_headers(value)


class WebhookUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    url: Optional[str] = Field(None, min_length=1, max_length=2048)
    type: Optional[WebhookType] = None
    headers: Optional[Dict[str, str]] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("headers")
    @classmethod
    def headers_are_ascii(cls, value):
        return ascii_headers(value)


class WebhookResponse(BaseModel):
    id: int
    name: str
    url: str
    type: WebhookType
    is_active: bool
    headers: Dict[str, str] = {}
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WebhookEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: WebhookResponse


class WebhookListResponse(BaseModel):
    success: bool = True
    data: List[WebhookResponse]

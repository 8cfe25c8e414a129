from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import Optional, Any, Dict, Literal

from app.schemas.common import IdentifierModel


class CommentIngress(IdentifierModel):
    user_id: Optional[str] = None
    comment: Optional[str] = None
    comment_id: Optional[str] = None
    post_id: Optional[str] = None
    name: Optional[str] = None
    user_name: Optional[str] = None
    post_link: Optional[str] = None
    parent_comment_id: Optional[str] = None
    reply_to: Optional[Any] = None
    action_type: Optional[Any] = None
    custom_action: Optional[Any] = None

    class Config:
        extra = "allow"


class ReplyRequest(IdentifierModel):
    parent_comment_id: Optional[str] = None
    reply_text: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    post_id: Optional[str] = None
    delete_after_reply: bool = False


class DeleteCommentRequest(BaseModel):
    delete_option: Literal["database", "platform", "both"] = Field(
        ...,
        validation_alias=AliasChoices("delete_option", "deleteOption"),
        description="database: remove the row; platform: notify subscribers only; both"
    )


class CommentResponse(BaseModel):
    id: int
    name: Optional[str] = None
    user_id: str
    comment: str
    comment_id: str
    post_id: str
    post_link: Optional[str] = None
    action_type: str
    parent_comment_id: Optional[str] = None
    reply_to: Optional[str] = None
    custom_action: Optional[str] = None
    extra: Dict[str, Any] = {}
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

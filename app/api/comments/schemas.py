from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

camel_config = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class CommentRequest(BaseModel):
    post_id: Optional[int] = Field(None, gt=0, description="Post being commented on")
    content: str = Field(..., min_length=1, max_length=1000)
    parent_comment_id: Optional[int] = Field(None, gt=0, description="Comment being replied to")

    model_config = camel_config


class CommentResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime] = None
    user_id: int
    username: str
    display_name: Optional[str] = None
    like_count: int = 0
    liked_by_me: bool = False
    parent_comment_id: Optional[int] = None
    replies: List["CommentResponse"] = []

    model_config = camel_config


CommentResponse.model_rebuild()

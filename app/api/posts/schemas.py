from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class PostRequest(BaseModel):
    text: str = Field(..., min_length=3, max_length=200, description="Post text")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Text must not be blank")
        return v


class PostResponse(BaseModel):
    id: int
    username: str
    text: str
    created_at: Optional[datetime] = None
    user_id: int
    like_count: int = 0
    liked_by_me: bool = False

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

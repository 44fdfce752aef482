from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.api.friendships.models import FriendshipStatus
from app.api.users.schemas import UserResponse

camel_config = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class FriendshipRequest(BaseModel):
    requester_id: int = Field(..., gt=0, description="User sending the request")
    receiver_id: int = Field(..., gt=0, description="User receiving the request")

    model_config = camel_config


class FriendshipResponse(BaseModel):
    id: int
    requester: UserResponse
    receiver: UserResponse
    status: FriendshipStatus

    model_config = camel_config


class FriendshipStatusResponse(BaseModel):
    """Relationship between two users; status is NONE when no row exists."""
    status: str
    friendship_id: Optional[int] = None
    requester_id: Optional[int] = None
    receiver_id: Optional[int] = None

    model_config = camel_config

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_user
from app.api.friendships.schemas import FriendshipRequest, FriendshipResponse, FriendshipStatusResponse
from app.api.friendships.service import FriendshipService
from app.api.users.models import User
from app.api.users.schemas import UserResponse
from app.core.pagination import PageRequest, page_params
from app.database.database import get_db

router = APIRouter(prefix="/friendships", tags=["friendships"])


def get_friendship_service(db: Session = Depends(get_db)) -> FriendshipService:
    return FriendshipService(db)


@router.get("/status", response_model=FriendshipStatusResponse)
def get_status(
        user_id: int = Query(..., alias="userId"),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.get_status(current_user.id, user_id)


@router.post("", response_model=FriendshipResponse, status_code=status.HTTP_201_CREATED)
def create_friendship(
        data: FriendshipRequest,
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.send_friend_request(data.requester_id, data.receiver_id)


@router.get("/{user_id}", response_model=List[FriendshipResponse])
def get_friendships_all_relations(
        user_id: int,
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.get_friendships_all_relations(user_id)


@router.put("/{friendship_id}/accept", response_model=FriendshipResponse)
def accept_friendship(
        friendship_id: int,
        user_id: int = Query(..., alias="userId"),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.accept_friend_request(friendship_id, user_id)


@router.put("/{friendship_id}/reject", response_model=FriendshipResponse)
def reject_friendship(
        friendship_id: int,
        user_id: int = Query(..., alias="userId"),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.reject_friend_request(friendship_id, user_id)


@router.get("/users/{user_id}/friends", response_model=List[UserResponse])
def get_friends(
        user_id: int,
        page_request: PageRequest = Depends(page_params()),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    """Friends in request order: sent requests first, then received. `sort` is checked but not applied."""
    return friendship_service.get_friends(user_id, page_request).content


@router.get("/users/{user_id}/requests", response_model=List[FriendshipResponse])
def get_received_requests(
        user_id: int,
        page_request: PageRequest = Depends(page_params()),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.get_incoming_friend_requests(user_id, page_request).content


@router.get("/users/{user_id}/sent-requests", response_model=List[FriendshipResponse])
def get_sent_requests(
        user_id: int,
        page_request: PageRequest = Depends(page_params()),
        current_user: User = Depends(get_current_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.get_outgoing_friend_requests(user_id, page_request).content

from typing import List

from fastapi import APIRouter, Depends, status, Response
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_user, require_admin
from app.api.posts.schemas import PostRequest, PostResponse
from app.api.posts.service import PostService
from app.api.users.models import User
from app.api.users.schemas import (
    UserResponse, UserRequest, RegisterUserRequest, UpdateProfileRequest, UserWithPostsResponse
)
from app.api.users.service import UserService
from app.core.pagination import PageRequest, page_params
from app.database.database import get_db

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    return PostService(db)


@router.get("", response_model=List[UserResponse])
def get_all(
        admin: User = Depends(require_admin),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.get_all_users()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_user(data: UserRequest, user_service: UserService = Depends(get_user_service)):
    return user_service.add_user(data)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterUserRequest, user_service: UserService = Depends(get_user_service)):
    return user_service.register_user(data)


@router.get("/me", response_model=UserResponse)
def get_me(
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.get_current_user(current_user.username)


@router.put("/me", response_model=UserResponse)
def update_profile(
        data: UpdateProfileRequest,
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.update_profile(current_user.id, data)


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(
        user_id: int,
        admin: User = Depends(require_admin),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.find_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
        user_id: int,
        data: UserRequest,
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.update_user(data, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
        user_id: int,
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service)
):
    user_service.delete_user_by_id(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post_for_user(
        user_id: int,
        data: PostRequest,
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    return post_service.create_post(user_id, data)


@router.get("/{user_id}/with-posts", response_model=UserWithPostsResponse)
def get_user_with_posts(
        user_id: int,
        page_request: PageRequest = Depends(page_params(max_size=5)),
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service)
):
    return user_service.get_user_with_posts(user_id, page_request, current_user)

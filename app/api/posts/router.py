from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_user
from app.api.posts.schemas import PostRequest, PostResponse
from app.api.posts.service import PostService
from app.api.users.models import User
from app.core.pagination import Page, PageRequest, page_params
from app.database.database import get_db

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    return PostService(db)


@router.get("", response_model=Page[PostResponse])
def get_posts(
        page_request: PageRequest = Depends(page_params(max_size=5)),
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    return post_service.get_all_posts(page_request, current_user)


@router.get("/{post_id}", response_model=PostResponse)
def get_post_by_id(
        post_id: int,
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    return post_service.find_post_by_id(post_id, current_user)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
        post_id: int,
        data: PostRequest,
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    return post_service.update_post(data, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
        post_id: int,
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    post_service.delete_post_by_id(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like")
def like_post(
        post_id: int,
        current_user: User = Depends(get_current_user),
        post_service: PostService = Depends(get_post_service)
):
    post_service.toggle_like(post_id, current_user)
    return {"success": True}

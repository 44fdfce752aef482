from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_user
from app.api.comments.schemas import CommentRequest, CommentResponse
from app.api.comments.service import CommentService
from app.api.users.models import User
from app.core.pagination import Page, PageRequest, page_params
from app.database.database import get_db

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
        data: CommentRequest,
        current_user: User = Depends(get_current_user),
        comment_service: CommentService = Depends(get_comment_service)
):
    return comment_service.create_comment(data, current_user)


@router.get("/post/{post_id}", response_model=Page[CommentResponse])
def get_comments(
        post_id: int,
        page_request: PageRequest = Depends(page_params(default_sort="createdAt,asc")),
        current_user: User = Depends(get_current_user),
        comment_service: CommentService = Depends(get_comment_service)
):
    return comment_service.get_comments_for_post(post_id, page_request, current_user)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
        comment_id: int,
        data: CommentRequest,
        current_user: User = Depends(get_current_user),
        comment_service: CommentService = Depends(get_comment_service)
):
    return comment_service.update_comment(comment_id, data.content, current_user)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
        comment_id: int,
        current_user: User = Depends(get_current_user),
        comment_service: CommentService = Depends(get_comment_service)
):
    comment_service.delete_comment(comment_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{comment_id}/like")
def like_comment(
        comment_id: int,
        current_user: User = Depends(get_current_user),
        comment_service: CommentService = Depends(get_comment_service)
):
    comment_service.toggle_like(comment_id, current_user)
    return {"success": True}

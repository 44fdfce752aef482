import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.api.comments.models import Comment
from app.api.comments.schemas import CommentRequest, CommentResponse
from app.api.posts.models import Post
from app.api.users.models import User
from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.core.pagination import Page, PageRequest, paginate

SORTABLE = {
    "id": Comment.id,
    "createdAt": Comment.created_at,
}


def to_response(comment: Comment, current_user: Optional[User] = None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        user_id=comment.user.id,
        username=comment.user.username,
        display_name=comment.user.display_name,
        like_count=len(comment.liked_by),
        liked_by_me=current_user is not None and current_user in comment.liked_by,
        parent_comment_id=comment.parent_comment_id,
        replies=[to_response(reply, current_user) for reply in comment.replies],
    )


class CommentService:
    """Comments on posts. A comment with a parent is a reply; only top-level comments are listed."""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def create_comment(self, data: CommentRequest, user: User) -> CommentResponse:
        if data.post_id is None:
            raise InvalidArgumentError("postId is required")
        post = self.db.query(Post).filter(Post.id == data.post_id).first()
        if not post:
            raise NotFoundError("Post not found")

        comment = Comment(user=user, post=post, content=data.content)

        if data.parent_comment_id is not None:
            parent = self._get_or_404(data.parent_comment_id)
            if parent.post_id != post.id:
                raise InvalidArgumentError("Parent comment belongs to another post")
            comment.parent_comment = parent

        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        self.logger.info("User %s commented %s on post %s", user.id, comment.id, post.id)
        return to_response(comment, user)

    def get_comments_for_post(self, post_id: int, page_request: PageRequest,
                              current_user: Optional[User] = None) -> Page:
        query = self.db.query(Comment).filter(
            Comment.post_id == post_id,
            Comment.parent_comment_id.is_(None)
        )
        page = paginate(query, page_request, SORTABLE)
        return page.map(lambda comment: to_response(comment, current_user))

    def toggle_like(self, comment_id: int, user: User) -> None:
        comment = self._get_or_404(comment_id)
        if user in comment.liked_by:
            comment.liked_by.remove(user)
        else:
            comment.liked_by.append(user)
        self.db.commit()

    def update_comment(self, comment_id: int, content: str, user: User) -> CommentResponse:
        comment = self._get_or_404(comment_id)
        if comment.user_id != user.id:
            self.logger.warning("User %s tried to edit comment %s", user.id, comment_id)
            raise ForbiddenError("You can only edit your own comments")

        comment.content = content
        self.db.commit()
        self.db.refresh(comment)
        return to_response(comment, user)

    def delete_comment(self, comment_id: int, user: User) -> None:
        comment = self._get_or_404(comment_id)
        if comment.user_id != user.id:
            self.logger.warning("User %s tried to delete comment %s", user.id, comment_id)
            raise ForbiddenError("You can only delete your own comments")

        self.db.delete(comment)
        self.db.commit()
        self.logger.info("Deleted comment %s", comment_id)

    def _get_or_404(self, comment_id: int) -> Comment:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError(f"No comment with id: {comment_id}")
        return comment

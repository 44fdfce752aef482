import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.api.posts.models import Post
from app.api.posts.schemas import PostRequest, PostResponse
from app.api.users.models import User
from app.core.exceptions import NotFoundError
from app.core.pagination import Page, PageRequest, paginate

SORTABLE = {
    "id": Post.id,
    "createdAt": Post.created_at,
}


def to_response(post: Post, current_user: Optional[User] = None) -> PostResponse:
    return PostResponse(
        id=post.id,
        username=post.user.username,
        text=post.text,
        created_at=post.created_at,
        user_id=post.user_id,
        like_count=len(post.liked_by),
        liked_by_me=current_user is not None and current_user in post.liked_by,
    )


class PostService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_all_posts(self, page_request: PageRequest, current_user: Optional[User] = None) -> Page:
        self.logger.info("Fetching posts (%s)", page_request)
        page = paginate(self.db.query(Post), page_request, SORTABLE)
        return page.map(lambda post: to_response(post, current_user))

    def get_posts_by_user(self, user_id: int, page_request: PageRequest,
                          current_user: Optional[User] = None) -> Page:
        page = paginate(self.db.query(Post).filter(Post.user_id == user_id), page_request, SORTABLE)
        return page.map(lambda post: to_response(post, current_user))

    def find_post_by_id(self, post_id: int, current_user: Optional[User] = None) -> PostResponse:
        self.logger.info("Fetching post %s", post_id)
        return to_response(self._get_or_404(post_id), current_user)

    def create_post(self, user_id: int, data: PostRequest) -> PostResponse:
        self.logger.info("Creating post for user %s", user_id)
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            self.logger.warning("Cannot create post, user %s does not exist", user_id)
            raise NotFoundError(f"No user with id: {user_id}")

        post = Post(text=data.text, user=user)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        self.logger.info("Created post %s", post.id)
        return to_response(post, user)

    def update_post(self, data: PostRequest, post_id: int) -> PostResponse:
        self.logger.info("Updating post %s", post_id)
        post = self._get_or_404(post_id)
        post.text = data.text
        self.db.commit()
        self.db.refresh(post)
        self.logger.info("Updated post %s", post_id)
        return to_response(post)

    def delete_post_by_id(self, post_id: int) -> None:
        self.logger.info("Deleting post %s", post_id)
        post = self._get_or_404(post_id)
        self.db.delete(post)
        self.db.commit()
        self.logger.info("Deleted post %s", post_id)

    def toggle_like(self, post_id: int, user: User) -> None:
        post = self._get_or_404(post_id)
        if user in post.liked_by:
            post.liked_by.remove(user)
        else:
            post.liked_by.append(user)
        self.db.commit()

    def _get_or_404(self, post_id: int) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            self.logger.warning("Post %s not found", post_id)
            raise NotFoundError(f"No post with id: {post_id}")
        return post

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.api.auth.utils import get_password_hash
from app.api.posts.schemas import PostResponse
from app.api.posts.service import PostService
from app.api.users.models import User
from app.api.users.schemas import (
    UserResponse, UserRequest, RegisterUserRequest, UpdateProfileRequest, UserWithPostsResponse
)
from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.core.pagination import Page, PageRequest


class UserService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_user_with_posts(self, user_id: int, page_request: PageRequest,
                            current_user: Optional[User] = None) -> UserWithPostsResponse:
        self.logger.info("Fetching user %s with posts", user_id)
        user = self._get_or_404(user_id)
        posts = PostService(self.db, self.logger).get_posts_by_user(user_id, page_request, current_user)
        return UserWithPostsResponse(
            user=UserResponse.model_validate(user),
            posts=Page[PostResponse].model_validate(posts.model_dump()),
        )

    def get_all_users(self) -> List[UserResponse]:
        self.logger.info("Fetching all users")
        users = self.db.query(User).order_by(User.id).all()
        if not users:
            self.logger.warning("No users in the database")
            raise NotFoundError("No users found")
        return [UserResponse.model_validate(user) for user in users]

    def get_current_user(self, username: str) -> UserResponse:
        self.logger.info("Fetching current user %s", username)
        user = self.get_user_by_username(username)
        if not user:
            self.logger.warning("User %s not found", username)
            raise NotFoundError(f"User not found: {username}")
        return UserResponse.model_validate(user)

    def find_user_by_id(self, user_id: int) -> UserResponse:
        self.logger.info("Fetching user %s", user_id)
        return UserResponse.model_validate(self._get_or_404(user_id))

    def add_user(self, data: UserRequest) -> UserResponse:
        self.logger.info("Adding user %s", data.username)
        if self._exists(data.username, data.email):
            self.logger.warning("Username or e-mail already taken: %s, %s", data.username, data.email)
            raise InvalidArgumentError("Username or e-mail already exists")

        user = User(password=get_password_hash(data.password))
        self._apply(user, data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        self.logger.info("Created user %s", user.id)
        return UserResponse.model_validate(user)

    def update_user(self, data: UserRequest, user_id: int) -> UserResponse:
        self.logger.info("Updating user %s", user_id)
        user = self._get_or_404(user_id)
        if self._exists(data.username, data.email, exclude_id=user_id):
            raise InvalidArgumentError("Username or e-mail already exists")

        self._apply(user, data)
        user.password = get_password_hash(data.password)
        self.db.commit()
        self.db.refresh(user)
        self.logger.info("Updated user %s", user_id)
        return UserResponse.model_validate(user)

    def delete_user_by_id(self, user_id: int) -> None:
        self.logger.info("Deleting user %s", user_id)
        user = self._get_or_404(user_id)
        self.db.delete(user)
        self.db.commit()
        self.logger.info("Deleted user %s", user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def register_user(self, data: RegisterUserRequest) -> UserResponse:
        self.logger.info("Registering user %s", data.username)
        if self._exists(data.username, data.email):
            raise InvalidArgumentError("Username or e-mail already exists")

        user = User(
            username=data.username,
            password=get_password_hash(data.password),
            email=data.email,
            role="USER",
            bio="",
            display_name=data.username,
            profile_image_path="",
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return UserResponse.model_validate(user)

    def update_profile(self, user_id: int, data: UpdateProfileRequest) -> UserResponse:
        self.logger.info("Updating profile of user %s", user_id)
        user = self._get_or_404(user_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return UserResponse.model_validate(user)

    def _get_or_404(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            self.logger.warning("User %s not found", user_id)
            raise NotFoundError(f"No user with id: {user_id}")
        return user

    def _exists(self, username: str, email: Optional[str], exclude_id: Optional[int] = None) -> bool:
        conditions = [User.username == username]
        if email:
            conditions.append(User.email == email)
        query = self.db.query(User.id).filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def _apply(user: User, data: UserRequest) -> None:
        user.username = data.username
        user.email = data.email
        user.role = data.role
        user.display_name = data.display_name
        user.bio = data.bio
        user.profile_image_path = data.profile_image_path

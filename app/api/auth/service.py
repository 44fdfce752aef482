import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.api.auth.schemas import LoginResponse
from app.api.auth.utils import create_access_token, verify_password, scope_for_role
from app.api.users.models import User


class AuthService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def authenticate_user(self, username: str, password: str) -> Optional[LoginResponse]:
        user = self._get_user_by_username(username)
        if not user or not verify_password(password, user.password):
            self.logger.warning("Failed login attempt for user %s", username)
            return None

        self.logger.info("Issuing token for user %s", user.username)
        token = self.generate_token(user)
        return LoginResponse(token=token, user_id=user.id)

    @staticmethod
    def generate_token(user: User) -> str:
        return create_access_token({"sub": user.username, "scope": scope_for_role(user.role)})

    def _get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.pagination import Page
from app.api.posts.schemas import PostResponse

ROLES = ("USER", "ADMIN")

camel_config = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class UserResponse(BaseModel):
    """Public view of a user, never carries the password."""
    id: int
    username: str
    email: Optional[str] = None
    role: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_path: Optional[str] = None

    model_config = camel_config


class UserRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Username")
    email: Optional[EmailStr] = Field(None, description="E-mail address")
    password: str = Field(..., min_length=7, description="Password")
    role: str = Field(..., min_length=1, description="USER or ADMIN")
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None
    profile_image_path: Optional[str] = Field(None, max_length=255)

    model_config = camel_config

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username must not be blank")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not re.match(r"^[A-Za-z0-9]+$", v):
            raise ValueError("Password may only contain letters and digits")
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        role = v.strip().upper()
        if role not in ROLES:
            raise ValueError("Role must be USER or ADMIN")
        return role


class RegisterUserRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=7)
    email: EmailStr

    model_config = camel_config

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be blank")
        return v


class UpdateProfileRequest(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None
    profile_image_path: Optional[str] = Field(None, max_length=255)

    model_config = camel_config


class UserWithPostsResponse(BaseModel):
    user: UserResponse
    posts: Page[PostResponse]

    model_config = camel_config

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(BaseModel):
    model_config = {
        'from_attributes': True,
        'alias_generator': to_camel,
        'populate_by_name': True
    }

    token: str
    user_id: int

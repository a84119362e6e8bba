"""Auth Schemas — registration, login and token results."""

from pydantic import Field

from taskhub.schemas.common import CamelModel
from taskhub.schemas.user import UserCreateRequest, UserResponse


class RegisterRequest(UserCreateRequest):
    """Same shape as admin user creation."""


class LoginRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class AuthResult(CamelModel):
    user: UserResponse
    token: str

"""User Records — shared construction of new accounts for register and admin create.

Invariants:
    - Plaintext passwords never reach the store; only the hasher output does
    - Blank phone/address values are stored as NULL
"""

from taskhub.core.domain_types import Role
from taskhub.core.patches import Address
from taskhub.core.ports import PasswordHasher
from taskhub.models.user import User
from taskhub.schemas.user import UserCreateRequest, UserResponse


def build_user(
    request: UserCreateRequest, hasher: PasswordHasher, role: Role,
) -> User:
    address = request.address.to_address() if request.address else Address()
    return User(
        name=request.name,
        email=request.email,
        password_hash=hasher.hash(request.password),
        phone_number=request.phone_number or None,
        role=role.value,
        **address.to_columns(),
    )


def to_user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)

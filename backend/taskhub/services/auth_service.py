"""Auth Service — registration, login and token-to-requester resolution.

Invariants:
    - Duplicate email on register -> ConflictError("Email already registered")
    - Unknown email and wrong password produce the SAME UnauthorizedError message
    - Token payload is exactly {id, email, role} (+ iat/exp added by the signer)
    - Public registration yields role "user" unless admin registration is enabled

Design Decisions:
    - Hasher and signer injected as ports: tests can swap in cheap fakes
    - Failure reason (user_not_found / invalid_password) goes to logs only
"""

import logging
from uuid import UUID

from taskhub.core.authorization import Requester
from taskhub.core.domain_types import Role
from taskhub.core.errors import (
    ConflictError, ResourceNotFoundError, UnauthorizedError,
)
from taskhub.core.ports import IdentityStore, PasswordHasher, TokenSigner
from taskhub.infrastructure.token_signer import INVALID_TOKEN_MESSAGE
from taskhub.models.user import User
from taskhub.schemas.auth import AuthResult
from taskhub.schemas.user import UserCreateRequest, UserResponse
from taskhub.services.user_records import build_user, to_user_response

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


class AuthService:
    def __init__(
        self,
        users: IdentityStore,
        hasher: PasswordHasher,
        signer: TokenSigner,
        allow_admin_registration: bool = False,
    ):
        self.users = users
        self.hasher = hasher
        self.signer = signer
        self.allow_admin_registration = allow_admin_registration

    async def register(self, request: UserCreateRequest) -> AuthResult:
        """Create an account and log it in."""
        if await self.users.find_by_email(request.email):
            logger.warning(
                "Registration rejected: email exists",
                extra={"event": "USER_REGISTRATION_FAILED", "reason": "email_exists"},
            )
            raise ConflictError("Email already registered")

        role = request.role or Role.USER
        if role == Role.ADMIN and not self.allow_admin_registration:
            role = Role.USER

        user = await self.users.insert(build_user(request, self.hasher, role))
        logger.info(
            "User registered",
            extra={"event": "USER_REGISTERED", "user_id": str(user.id)},
        )
        return AuthResult(user=to_user_response(user), token=self._issue(user))

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.users.find_by_email(email)
        if user is None:
            self._log_failed_login("user_not_found")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        if not self.hasher.verify(password, user.password_hash):
            self._log_failed_login("invalid_password")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        logger.info(
            "User logged in",
            extra={"event": "USER_LOGGED_IN", "user_id": str(user.id)},
        )
        return AuthResult(user=to_user_response(user), token=self._issue(user))

    def authenticate(self, token: str) -> Requester:
        """Verify a bearer token and turn its payload into a Requester."""
        payload = self.signer.verify(token)
        try:
            return Requester(
                id=UUID(str(payload["id"])),
                email=str(payload["email"]),
                role=Role(payload["role"]),
            )
        except (KeyError, ValueError):
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

    async def get_profile(self, requester: Requester) -> UserResponse:
        user = await self.users.find_by_id(requester.id)
        if user is None:
            raise ResourceNotFoundError("User", str(requester.id))
        return to_user_response(user)

    def _issue(self, user: User) -> str:
        return self.signer.sign({
            "id": str(user.id),
            "email": user.email,
            "role": user.role,
        })

    def _log_failed_login(self, reason: str) -> None:
        logger.warning(
            "Login failed",
            extra={"event": "LOGIN_FAILED", "reason": reason},
        )

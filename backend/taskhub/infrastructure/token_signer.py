"""Session Tokens — PyJWT signing and verification behind the TokenSigner port.

Invariants:
    - Payload carries {id, email, role} plus iat/exp claims
    - Every verification failure (expired, tampered, malformed) raises
      UnauthorizedError with one message; callers cannot tell which

Design Decisions:
    - HS256 shared secret from settings; expiry in seconds
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from taskhub.core.errors import UnauthorizedError

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class JWTTokenSigner:
    def __init__(
        self, secret: str, expires_in_seconds: int, algorithm: str = "HS256",
    ):
        self.secret = secret
        self.expires_in = timedelta(seconds=expires_in_seconds)
        self.algorithm = algorithm

    def sign(self, payload: dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        claims = {**payload, "iat": now, "exp": now + self.expires_in}
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token, self.secret, algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError:
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

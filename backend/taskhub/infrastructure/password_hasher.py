"""Password Hashing — passlib CryptContext behind the PasswordHasher port.

Invariants:
    - hash() output is opaque to callers; only verify() interprets it
    - verify() never raises on a malformed stored hash, it returns False

Design Decisions:
    - bcrypt scheme via passlib; rounds configurable so tests stay fast
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class BcryptPasswordHasher:
    """One-way hash + verify for account passwords."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError) as e:
            logger.warning(f"Unverifiable password hash: {e}")
            return False

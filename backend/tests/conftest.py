"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or summarizer API
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault(
    "JWT_SECRET", "test-secret-that-is-long-enough-for-hs256-signing",
)
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

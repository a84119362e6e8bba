"""User Schemas — email validation keeps the submitted address text."""

import pytest
from pydantic import ValidationError

from taskhub.schemas.auth import RegisterRequest
from taskhub.schemas.user import UserCreateRequest, UserUpdateRequest


def test_mixed_case_email_is_stored_as_submitted():
    req = UserCreateRequest(
        name="Ana Silva", email="Ana@Example.COM", password="password123",
    )
    assert req.email == "Ana@Example.COM"


@pytest.mark.parametrize(
    "email", ["not-an-email", "a@b", "two@@example.com", "space @example.com"],
)
def test_malformed_email_rejected(email):
    with pytest.raises(ValidationError):
        UserCreateRequest(name="Ana Silva", email=email, password="password123")


def test_register_request_shares_email_rule():
    with pytest.raises(ValidationError):
        RegisterRequest(name="Ana Silva", email="nope", password="password123")


def test_update_email_is_optional_but_validated():
    assert UserUpdateRequest(name="New Name").email is None
    with pytest.raises(ValidationError):
        UserUpdateRequest(email="nope")
    assert UserUpdateRequest(email="new@example.com").to_patch().email == "new@example.com"

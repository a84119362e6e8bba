"""User Schemas — account payloads with field-level validation.

Invariants:
    - name: 2-255 chars, stripped; password: 8-128 chars
    - UserUpdateRequest must carry at least one field
    - An explicit null address is treated as "not supplied"
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from taskhub.core.domain_types import Role
from taskhub.core.patches import UNSET, Address, UserPatch
from taskhub.schemas.common import CamelModel, Email, PaginationMeta


class AddressIn(CamelModel):
    address_line1: str | None = Field(None, max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state_or_province: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)

    def to_address(self) -> Address:
        return Address(
            address_line1=self.address_line1,
            address_line2=self.address_line2,
            city=self.city,
            state_or_province=self.state_or_province,
            postal_code=self.postal_code,
            country=self.country,
        )


def _strip_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("name must be at least 2 characters")
    return v


class UserCreateRequest(CamelModel):
    """Admin-side account creation (also the shape of public registration)."""
    name: str = Field(min_length=2, max_length=255)
    email: Email
    password: str = Field(min_length=8, max_length=128)
    phone_number: str | None = Field(None, max_length=50)
    address: AddressIn | None = None
    role: Role | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class UserUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    email: Email | None = None
    phone_number: str | None = Field(None, max_length=50)
    address: AddressIn | None = None
    role: Role | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v) if v is not None else v

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("update requires at least one field")
        return self

    def to_patch(self) -> UserPatch:
        fields = self.model_fields_set
        return UserPatch(
            name=self.name if "name" in fields and self.name is not None else UNSET,
            email=self.email if "email" in fields and self.email is not None else UNSET,
            phone_number=(
                self.phone_number if "phone_number" in fields else UNSET
            ),
            address=(
                self.address.to_address()
                if "address" in fields and self.address is not None else UNSET
            ),
            role=self.role if "role" in fields and self.role is not None else UNSET,
        )


class UserResponse(CamelModel):
    """Public-facing user data, never includes the password hash."""
    id: UUID
    name: str
    email: str
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state_or_province: str | None = None
    postal_code: str | None = None
    country: str | None = None
    role: Role
    created_at: datetime
    updated_at: datetime


class UserListResult(CamelModel):
    users: list[UserResponse]
    pagination: PaginationMeta

"""Common Schemas — camelCase base model, success envelope, pagination block, email field."""

from typing import Annotated, Generic, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskhub.core.listing import PageInfo

T = TypeVar("T")


def _check_email(value: str) -> str:
    """Reject malformed addresses; keep the submitted text as the stored value."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


Email = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case on input, emits camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(BaseModel, Generic[T]):
    """{"success": true, "data": ...} envelope for every 2xx response."""
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_page_info(cls, info: PageInfo) -> "PaginationMeta":
        return cls(
            page=info.page,
            limit=info.limit,
            total=info.total,
            total_pages=info.total_pages,
        )

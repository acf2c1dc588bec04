from pydantic import BaseModel, ConfigDict, field_validator

from mileage.schemas.common import UtcDatetime, bounded_text, require_text
from mileage.schemas.user import UserPublic


class CommentContent(BaseModel):
    model_config = ConfigDict(validate_default=True)

    content: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def present_and_bounded(cls, v):
        return bounded_text(require_text(v))


class CommentCreateRequest(BaseModel):
    comment: CommentContent


class CommentPublic(BaseModel):
    id: int
    content: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    user: UserPublic | None = None


class CommentPage(BaseModel):
    comments: str  # JSON-encoded list of CommentPublic
    total_pages: int
    current_page: int

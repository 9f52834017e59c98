"""Pydantic models for the comment request."""

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import AUTHOR_MAX_LENGTH, COMMENT_MAX_LENGTH


class CommentRequest(BaseModel):
    """Validation model for ``POST /comment/{id}`` bodies."""

    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH, description="Comment text")
    author: str | None = Field(None, max_length=AUTHOR_MAX_LENGTH, description="Optional author name")

"""Shared image models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, StrictStr
from pydantic.alias_generators import to_camel

# Wire format is camelCase; Python code uses field names
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Comment(BaseModel):
    """A single comment attached to an image."""

    model_config = CAMEL_CONFIG

    text: StrictStr = Field(..., min_length=1, description="Comment text")
    author: StrictStr | None = Field(None, description="Optional comment author")
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")


class ImageRecord(BaseModel):
    """Canonical image record owned by the image repository."""

    model_config = CAMEL_CONFIG

    image_id: StrictStr = Field(..., alias="id", description="Unique image identifier")
    provider_id: StrictStr = Field(..., description="Blob store object key")
    url: StrictStr = Field(..., description="Permanent retrieval URL")
    fingerprint: StrictStr = Field(..., description="SHA-256 digest of the original bytes")

    like_count: NonNegativeInt = Field(0, description="Number of likes")
    comments: list[Comment] = Field(default_factory=list, description="Comments, oldest first")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")

    image_name: StrictStr | None = Field(None, description="Original file name")
    mime_type: StrictStr | None = Field(None, description="MIME type of the image")
    file_size: NonNegativeInt | None = Field(None, description="Image size in bytes")

    def to_response(self) -> dict[str, Any]:
        """Public representation; storage internals are not exposed."""
        return self.model_dump(by_alias=True, exclude={"provider_id", "fingerprint"})


class ListImagesResponse(BaseModel):
    """Paginated response for listing images."""

    model_config = CAMEL_CONFIG

    images: list[dict[str, Any]] = Field(..., description="Images on this page, newest first")
    current_page: int = Field(..., description="Requested page number (1-based)")
    total_pages: int = Field(..., description="ceil(total_count / page_size)")
    total_count: int = Field(..., description="Number of images visible in the snapshot")
    page_size: int = Field(..., description="Requested page size")
    has_more: bool = Field(..., description="Whether later pages exist")
    snapshot: StrictStr | None = Field(
        None,
        description="Listing snapshot token; send it back to keep pages stable",
    )

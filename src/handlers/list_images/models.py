"""
Pydantic models for the list images request.
"""

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_PAGE_SIZE


class ListImagesRequest(BaseModel):
    """
    Validation model for the list images API.

    Query parameters arrive as strings; pydantic coerces them to integers.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    page: int = Field(
        default=DEFAULT_PAGE,
        ge=1,
        description="Page number, starting at 1",
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=MIN_PAGE_SIZE,
        le=MAX_PAGE_SIZE,
        alias="pageSize",
        description=f"Results per page ({MIN_PAGE_SIZE}-{MAX_PAGE_SIZE})",
    )
    snapshot: str | None = Field(
        None,
        min_length=1,
        description="Snapshot token returned by a previous page",
    )

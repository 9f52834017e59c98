"""Pagination model."""

from pydantic import BaseModel, Field, StrictBool, StrictInt


class PaginationInfo(BaseModel):
    """Pagination metadata for list responses."""

    current_page: StrictInt = Field(..., description="Requested page number (1-based)")
    page_size: StrictInt = Field(..., description="Maximum number of items per page")
    offset: StrictInt = Field(..., description="Offset of the first item of this page")
    total_count: StrictInt = Field(..., description="Total number of items")
    total_pages: StrictInt = Field(..., description="Total number of pages")
    has_more: StrictBool = Field(..., description="Whether more items are available after this page")

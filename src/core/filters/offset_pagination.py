"""
Page-number pagination utilities.
"""

from core.models.pagination import PaginationInfo
from core.utils.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
)


class OffsetPagination:
    """
    Page-number pagination helper.

    Translates 1-based page numbers into offsets over an ordered collection
    and derives the metadata returned to API consumers.

    Typical usage:
    1. Validate page and page size
    2. Compute the offset of the requested page
    3. Build page metadata once the total is known
    """

    @staticmethod
    def offset_for(page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> int:
        """
        Offset of the first item of ``page``.

        Example:
            offset_for(page=3, page_size=20) → 40
        """
        return (page - 1) * page_size

    @staticmethod
    def total_pages(total_count: int, page_size: int) -> int:
        """ceil(total_count / page_size); an empty collection has 0 pages."""
        return (total_count + page_size - 1) // page_size if page_size > 0 else 0

    @staticmethod
    def validate(page: int, page_size: int) -> tuple[bool, str]:
        """
        Validate pagination parameters.

        Validation rules:
        - page must be at least 1
        - page_size must be within [MIN_PAGE_SIZE, MAX_PAGE_SIZE]

        Returns:
            A tuple of:
            - is_valid: Whether parameters are valid
            - error_message: Human-readable error message if invalid
        """
        if page < 1:
            return False, "Page must be a positive integer"

        if page_size < MIN_PAGE_SIZE:
            return False, f"Page size must be at least {MIN_PAGE_SIZE}"

        if page_size > MAX_PAGE_SIZE:
            return False, f"Page size must not exceed {MAX_PAGE_SIZE}"

        return True, ""

    @classmethod
    def get_page_info(
        cls,
        page: int,
        page_size: int,
        total_count: int,
    ) -> PaginationInfo:
        """
        Generate pagination metadata for API responses.

        Notes:
            - Page numbering starts at 1
            - total_pages is rounded up
            - A page past the end keeps its requested number
        """
        offset = cls.offset_for(page, page_size)

        return PaginationInfo(
            current_page=page,
            page_size=page_size,
            offset=offset,
            total_count=total_count,
            total_pages=cls.total_pages(total_count, page_size),
            has_more=offset + page_size < total_count,
        )

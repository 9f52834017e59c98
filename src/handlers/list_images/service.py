"""
Business logic for paginated image listing.
"""

from aws_lambda_powertools import Logger

from core.filters.offset_pagination import OffsetPagination
from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.models.errors import ValidationError
from core.models.image import ImageRecord, ListImagesResponse
from core.repositories.image_repository import ImageRepository

logger = Logger(UTC=True)


class ListService:
    """Application service responsible for listing gallery images.

    This service coordinates:
    - Page number to offset translation
    - Snapshot selection, so a client paging through the gallery sees a
      stable sequence while new images arrive
    - Filling a logical page from repository reads that may be smaller
    """

    def __init__(self, repository: ImageRepository | None = None) -> None:
        self.repository = repository or DynamoDBImageRepository()

    def list_images(
        self,
        *,
        page: int,
        page_size: int,
        snapshot: str | None = None,
    ) -> ListImagesResponse:
        """Return one page of images, newest first.

        Args:
            page: 1-based page number
            page_size: Number of images per page
            snapshot: Token from an earlier page; None starts a new session

        Returns:
            ListImagesResponse; a page past the end has no images but keeps
            its requested number

        Raises:
            ValidationError: If pagination parameters are invalid
            DatabaseError: If the repository read fails
        """
        is_valid, error_message = OffsetPagination.validate(page, page_size)
        if not is_valid:
            raise ValidationError(message=error_message, details={"page": page, "page_size": page_size})

        if snapshot is None:
            snapshot = self.repository.latest_sort_key()

        offset = OffsetPagination.offset_for(page, page_size)
        records, total_count = self._read_page(offset=offset, page_size=page_size, snapshot=snapshot)

        info = OffsetPagination.get_page_info(page, page_size, total_count)

        logger.info(
            "Images listed",
            extra={
                "page": page,
                "page_size": page_size,
                "returned": len(records),
                "total_count": total_count,
            },
        )

        return ListImagesResponse(
            images=[record.to_response() for record in records],
            current_page=info.current_page,
            total_pages=info.total_pages,
            total_count=info.total_count,
            page_size=info.page_size,
            has_more=info.has_more,
            snapshot=snapshot,
        )

    def _read_page(
        self,
        *,
        offset: int,
        page_size: int,
        snapshot: str | None,
    ) -> tuple[list[ImageRecord], int]:
        """Chain repository reads until the page is full or the rows run out.

        The repository may clamp ``limit`` below ``page_size``.
        """
        records: list[ImageRecord] = []
        total_count = 0

        while len(records) < page_size:
            batch, total_count = self.repository.page(
                offset=offset + len(records),
                limit=page_size - len(records),
                snapshot=snapshot,
            )
            records.extend(batch)

            if not batch or offset + len(records) >= total_count:
                break

        return records, total_count

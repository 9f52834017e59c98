"""Abstract contract for image record persistence."""

from abc import ABC, abstractmethod

from core.models.image import Comment, ImageRecord


class ImageRepository(ABC):
    """Single owner of the image collection.

    Implementations could be DynamoDB, PostgreSQL, etc.
    Services depend on this interface, not the implementation, and never
    hold a reference to the underlying storage.
    """

    @abstractmethod
    def insert(
        self,
        *,
        provider_id: str,
        url: str,
        fingerprint: str,
        image_name: str | None = None,
        mime_type: str | None = None,
        file_size: int | None = None,
    ) -> ImageRecord:
        """Create a record with zero likes and no comments.

        Fingerprint uniqueness is enforced here, at write time.

        Raises:
            DuplicateImageError: If a record with this fingerprint exists
            DatabaseError: If creation fails for other reasons
        """

    @abstractmethod
    def fingerprint_exists(self, *, fingerprint: str) -> bool:
        """Return True if a record with this fingerprint exists.

        Raises:
            DatabaseError: If the check fails
        """

    @abstractmethod
    def get(self, *, image_id: str) -> ImageRecord:
        """Fetch a single record.

        Raises:
            NotFoundError: If no record has this id
            DatabaseError: If the read fails
        """

    @abstractmethod
    def page(
        self,
        *,
        offset: int,
        limit: int,
        snapshot: str | None = None,
    ) -> tuple[list[ImageRecord], int]:
        """Read records ``[offset, offset + limit)`` in listing order.

        Listing order is newest first, ties broken by id descending.
        ``limit`` is clamped to the configured maximum page size; an offset
        past the end yields an empty list. When ``snapshot`` is given, only
        records at or before that sort key are visible.

        Returns:
            (records, total_count)

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def count(self, *, snapshot: str | None = None) -> int:
        """Number of records visible in ``snapshot`` (all records if None).

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def latest_sort_key(self) -> str | None:
        """Sort key of the newest record, or None for an empty collection.

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def increment_like(self, *, image_id: str, source_identity: str) -> None:
        """Record one like from ``source_identity`` and bump the counter.

        Both writes happen atomically or not at all.

        Raises:
            AlreadyLikedError: If this source already liked this image
            NotFoundError: If the image does not exist
            DatabaseError: If the write fails
        """

    @abstractmethod
    def append_comment(
        self,
        *,
        image_id: str,
        text: str,
        author: str | None = None,
    ) -> Comment:
        """Append a comment atomically, preserving arrival order.

        Raises:
            ValidationError: If ``text`` is empty
            NotFoundError: If the image does not exist
            DatabaseError: If the write fails
        """

"""DynamoDB-backed implementation of ImageRepository.

Single-table layout keyed by ``pk``:

- ``IMAGE#<image_id>``: the image record. ``gallery``/``sort_key`` feed the
  sparse ``gallery-sort-index`` GSI that defines listing order.
- ``FINGERPRINT#<sha256>``: uniqueness guard for content fingerprints.
- ``LIKE#<image_id>#<source>``: one like per (image, source) pair, both parts
  percent-encoded.
"""

import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any
from urllib.parse import quote

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import ConditionBase, Key
from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.infrastructure.aws.aws_errors import (
    CONDITIONAL_CHECK_FAILED,
    CONDITIONAL_CHECK_FAILED_EXCEPTION,
    TRANSACTION_CANCELED_EXCEPTION,
    cancellation_codes,
    client_error_code,
    is_retryable,
)
from core.models.errors import (
    AlreadyLikedError,
    DatabaseError,
    DuplicateImageError,
    ImageServiceError,
    NotFoundError,
    UpstreamTimeoutError,
    ValidationError,
)
from core.models.image import Comment, ImageRecord
from core.repositories.image_repository import ImageRepository
from core.utils.constants import (
    ERROR_CODE_COMMENT_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_INVALID_COMMENT,
    ERROR_CODE_LIKE_FAILED,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DUPLICATE_CHECK_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_LIST_FAILED,
    FINGERPRINT_KEY_PREFIX,
    GALLERY_INDEX_NAME,
    GALLERY_PARTITION,
    IMAGE_KEY_PREFIX,
    LIKE_KEY_PREFIX,
    PK_ATTRIBUTE,
)
from core.utils.settings import Settings, get_settings
from core.utils.time import utc_now_iso

Item = dict[str, Any]
ConflictMapper = Callable[[ClientError], ImageServiceError | None]

logger = Logger(UTC=True)


def image_key(image_id: str) -> str:
    return f"{IMAGE_KEY_PREFIX}{image_id}"


def fingerprint_key(fingerprint: str) -> str:
    return f"{FINGERPRINT_KEY_PREFIX}{fingerprint}"


def like_key(image_id: str, source_identity: str) -> str:
    # Both parts are percent-encoded so a "#" inside either cannot shift the split
    return f"{LIKE_KEY_PREFIX}{quote(image_id, safe='')}#{quote(source_identity, safe='')}"


def sort_key(created_at: str, image_id: str) -> str:
    """Listing sort key: creation time, then id, so the order is total."""
    return f"{created_at}#{image_id}"


class DynamoDBImageRepository(ImageRepository):
    """DynamoDB-backed image repository with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(
        self,
        adapter: DynamoDBAdapterProtocol | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize with DynamoDB adapter."""
        settings = settings or get_settings()
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(settings)
        self._max_page_size = settings.max_page_size
        self._query_batch_size = settings.query_batch_size

    @property
    def max_page_size(self) -> int:
        return self._max_page_size

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image identifier."""
        return f"img_{uuid.uuid4().hex}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

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
        """Create an image record and claim its fingerprint in one transaction.

        Raises:
            DuplicateImageError: If the fingerprint is already claimed
            DatabaseError: If creation fails
        """
        image_id = self.generate_image_id()
        created_at = utc_now_iso()

        record = ImageRecord(
            image_id=image_id,
            provider_id=provider_id,
            url=url,
            fingerprint=fingerprint,
            like_count=0,
            comments=[],
            created_at=created_at,
            image_name=image_name,
            mime_type=mime_type,
            file_size=file_size,
        )

        item: Item = {
            PK_ATTRIBUTE: image_key(image_id),
            **record.model_dump(exclude_none=True),
            "gallery": GALLERY_PARTITION,
            "sort_key": sort_key(created_at, image_id),
        }
        guard: Item = {
            PK_ATTRIBUTE: fingerprint_key(fingerprint),
            "image_id": image_id,
            "created_at": created_at,
        }

        logger.debug("Creating image record", extra={"image_id": image_id})

        with self._translate_errors(
            operation="insert",
            message="Unable to save image metadata at this time",
            error_code=ERROR_CODE_METADATA_CREATE_FAILED,
            details={"image_id": image_id},
            on_conflict=lambda exc: self._duplicate_conflict(exc, fingerprint),
        ):
            self._db.transact_write_items(
                items=[
                    {
                        "Put": {
                            "Item": item,
                            "ConditionExpression": f"attribute_not_exists({PK_ATTRIBUTE})",
                        }
                    },
                    {
                        "Put": {
                            "Item": guard,
                            "ConditionExpression": f"attribute_not_exists({PK_ATTRIBUTE})",
                        }
                    },
                ]
            )

        logger.info("Image record created", extra={"image_id": image_id})
        return record

    def increment_like(self, *, image_id: str, source_identity: str) -> None:
        """Write the like record and bump ``like_count`` in one transaction."""
        like_item: Item = {
            PK_ATTRIBUTE: like_key(image_id, source_identity),
            "image_id": image_id,
            "source_identity": source_identity,
            "created_at": utc_now_iso(),
        }

        with self._translate_errors(
            operation="like",
            message="Unable to record like at this time",
            error_code=ERROR_CODE_LIKE_FAILED,
            details={"image_id": image_id},
            on_conflict=lambda exc: self._like_conflict(exc, image_id),
        ):
            self._db.transact_write_items(
                items=[
                    {
                        "Put": {
                            "Item": like_item,
                            "ConditionExpression": f"attribute_not_exists({PK_ATTRIBUTE})",
                        }
                    },
                    {
                        "Update": {
                            "Key": {PK_ATTRIBUTE: image_key(image_id)},
                            "UpdateExpression": "ADD like_count :one",
                            "ConditionExpression": f"attribute_exists({PK_ATTRIBUTE})",
                            "ExpressionAttributeValues": {":one": 1},
                        }
                    },
                ]
            )

        logger.info("Image liked", extra={"image_id": image_id})

    def append_comment(
        self,
        *,
        image_id: str,
        text: str,
        author: str | None = None,
    ) -> Comment:
        """Append a comment with a server-side ``list_append``.

        No read-modify-write happens here, so concurrent commenters on the
        same image cannot overwrite each other.
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError(
                message="Comment text is required",
                error_code=ERROR_CODE_INVALID_COMMENT,
                details={"image_id": image_id},
            )

        comment = Comment(text=text, author=author or None, created_at=utc_now_iso())

        with self._translate_errors(
            operation="comment",
            message="Unable to save comment at this time",
            error_code=ERROR_CODE_COMMENT_FAILED,
            details={"image_id": image_id},
            on_conflict=lambda exc: self._missing_image(exc, image_id),
        ):
            self._db.update_item(
                Key={PK_ATTRIBUTE: image_key(image_id)},
                UpdateExpression="SET comments = list_append(if_not_exists(comments, :empty), :new)",
                ConditionExpression=f"attribute_exists({PK_ATTRIBUTE})",
                ExpressionAttributeValues={
                    ":empty": [],
                    ":new": [comment.model_dump(exclude_none=True)],
                },
            )

        logger.info("Comment added", extra={"image_id": image_id})
        return comment

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fingerprint_exists(self, *, fingerprint: str) -> bool:
        """Strongly consistent lookup of the fingerprint guard.

        Fails closed: if the check itself fails, an error is raised rather
        than letting a possible duplicate through.
        """
        with self._translate_errors(
            operation="fingerprint_exists",
            message="Unable to verify duplicate image",
            error_code=ERROR_CODE_METADATA_DUPLICATE_CHECK_FAILED,
            details={"fingerprint": fingerprint},
        ):
            response = self._db.get_item(
                key={PK_ATTRIBUTE: fingerprint_key(fingerprint)},
                consistent_read=True,
            )

        return response.get("Item") is not None

    def get(self, *, image_id: str) -> ImageRecord:
        with self._translate_errors(
            operation="get",
            message="Unable to retrieve image metadata",
            error_code=ERROR_CODE_METADATA_FETCH_FAILED,
            details={"image_id": image_id},
        ):
            response = self._db.get_item(key={PK_ATTRIBUTE: image_key(image_id)})

        item = response.get("Item")
        if item is None:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            )

        return self._to_record(item)

    def page(
        self,
        *,
        offset: int,
        limit: int,
        snapshot: str | None = None,
    ) -> tuple[list[ImageRecord], int]:
        """Read a slice of the gallery, newest first.

        DynamoDB cannot skip rows server-side, so the query walks the index
        in ``query_batch_size`` chunks chained through ``LastEvaluatedKey``,
        discarding the first ``offset`` items.
        """
        if offset < 0:
            raise ValidationError(message="Offset must be zero or a positive integer")
        if limit < 1:
            raise ValidationError(message="Limit must be at least 1")

        limit = min(limit, self._max_page_size)
        total = self.count(snapshot=snapshot)

        if offset >= total:
            return [], total

        collected: list[Item] = []
        skipped = 0

        with self._translate_errors(
            operation="page",
            message="Unable to list images",
            error_code=ERROR_CODE_METADATA_LIST_FAILED,
            details={"offset": offset, "limit": limit},
        ):
            for batch in self._query_gallery(snapshot=snapshot):
                for item in batch:
                    if skipped < offset:
                        skipped += 1
                        continue

                    collected.append(item)
                    if len(collected) >= limit:
                        break

                if len(collected) >= limit:
                    break

        logger.debug(
            "Gallery page read",
            extra={"offset": offset, "limit": limit, "count": len(collected), "total": total},
        )
        return [self._to_record(item) for item in collected], total

    def count(self, *, snapshot: str | None = None) -> int:
        total = 0

        with self._translate_errors(
            operation="count",
            message="Unable to count images",
            error_code=ERROR_CODE_METADATA_LIST_FAILED,
        ):
            for response in self._query_pages(
                KeyConditionExpression=self._gallery_condition(snapshot),
                Select="COUNT",
            ):
                total += int(response.get("Count", 0))

        return total

    def latest_sort_key(self) -> str | None:
        with self._translate_errors(
            operation="latest_sort_key",
            message="Unable to list images",
            error_code=ERROR_CODE_METADATA_LIST_FAILED,
        ):
            response = self._db.query(
                IndexName=GALLERY_INDEX_NAME,
                KeyConditionExpression=self._gallery_condition(None),
                ScanIndexForward=False,
                Limit=1,
            )

        items = response.get("Items", [])
        return str(items[0]["sort_key"]) if items else None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _gallery_condition(snapshot: str | None) -> ConditionBase:
        condition: ConditionBase = Key("gallery").eq(GALLERY_PARTITION)
        if snapshot:
            condition &= Key("sort_key").lte(snapshot)
        return condition

    def _query_gallery(self, *, snapshot: str | None) -> Iterator[list[Item]]:
        for response in self._query_pages(
            KeyConditionExpression=self._gallery_condition(snapshot),
            Limit=self._query_batch_size,
        ):
            page_items = response.get("Items", [])

            if not isinstance(page_items, list):
                raise DatabaseError(
                    message="Invalid query response from DynamoDB",
                    error_code=ERROR_CODE_METADATA_LIST_FAILED,
                )

            yield page_items

    def _query_pages(self, **kwargs: Any) -> Iterator[dict[str, Any]]:
        """Yield raw query responses over the gallery index, newest first."""
        query_kwargs: dict[str, Any] = {
            "IndexName": GALLERY_INDEX_NAME,
            "ScanIndexForward": False,
            **kwargs,
        }

        while True:
            response = self._db.query(**query_kwargs)
            yield response

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return

            query_kwargs["ExclusiveStartKey"] = last_evaluated_key

    @staticmethod
    def _to_record(item: Item) -> ImageRecord:
        """Convert a stored item (numbers arrive as Decimal) into a record."""
        data = {
            key: int(value) if isinstance(value, Decimal) else value
            for key, value in item.items()
        }
        return ImageRecord.model_validate(data)

    @staticmethod
    def _duplicate_conflict(exc: ClientError, fingerprint: str) -> ImageServiceError | None:
        if client_error_code(exc) != TRANSACTION_CANCELED_EXCEPTION:
            return None

        if CONDITIONAL_CHECK_FAILED in cancellation_codes(exc):
            logger.info("Fingerprint already claimed", extra={"fingerprint": fingerprint})
            return DuplicateImageError(
                message="This image already exists",
                details={"fingerprint": fingerprint},
            )

        return None

    @staticmethod
    def _like_conflict(exc: ClientError, image_id: str) -> ImageServiceError | None:
        if client_error_code(exc) != TRANSACTION_CANCELED_EXCEPTION:
            return None

        codes = cancellation_codes(exc)

        # Request order: [like put, counter update]
        if len(codes) > 1 and codes[1] == CONDITIONAL_CHECK_FAILED:
            return NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            )

        if codes and codes[0] == CONDITIONAL_CHECK_FAILED:
            return AlreadyLikedError(
                message="You already liked this image",
                details={"image_id": image_id},
            )

        return None

    @staticmethod
    def _missing_image(exc: ClientError, image_id: str) -> ImageServiceError | None:
        if client_error_code(exc) == CONDITIONAL_CHECK_FAILED_EXCEPTION:
            return NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            )
        return None

    @contextmanager
    def _translate_errors(
        self,
        *,
        operation: str,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
        on_conflict: ConflictMapper | None = None,
    ) -> Iterator[None]:
        """Translate botocore failures raised inside the block into domain errors."""
        try:
            yield

        except ClientError as exc:
            domain_error = on_conflict(exc) if on_conflict else None
            if domain_error is not None:
                raise domain_error from exc

            retryable = is_retryable(exc)
            logger.error(
                "DynamoDB operation failed",
                extra={
                    "operation": operation,
                    "code": client_error_code(exc),
                    "retryable": retryable,
                    **(details or {}),
                },
            )
            raise DatabaseError(
                message=message,
                error_code=error_code,
                details=details,
                retryable=retryable,
            ) from exc

        except (ReadTimeoutError, ConnectTimeoutError) as exc:
            logger.error("DynamoDB operation timed out", extra={"operation": operation})
            raise UpstreamTimeoutError(message=message, details=details) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected DynamoDB error", extra={"operation": operation})
            raise DatabaseError(
                message=message,
                error_code=error_code,
                details=details,
                retryable=True,
            ) from exc

"""Business logic for batch image uploads.

Each file in a batch ends in exactly one outcome: stored, skipped as a
duplicate, or failed with a reason. One bad file never fails its siblings.
"""

import threading
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from aws_lambda_powertools import Logger

from core.filters.duplicate_gate import DuplicateGate
from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.infrastructure.aws.s3_blob_store import S3BlobStore
from core.models.errors import (
    DuplicateImageError,
    ImageServiceError,
    UpstreamTimeoutError,
    ValidationError,
)
from core.models.upload import BatchUploadResult, UploadItemResult
from core.repositories.blob_store import BlobReceipt, BlobStore
from core.repositories.image_repository import ImageRepository
from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    ERROR_CODE_NO_FILES,
    ERROR_CODE_TOO_MANY_FILES,
    MAX_BATCH_FILES,
    MAX_FILE_SIZE,
    REASON_DUPLICATE,
    REASON_FILE_TOO_LARGE,
    REASON_STORE_FAILED,
    REASON_TIMEOUT,
    REASON_UNSUPPORTED_TYPE,
    REASON_UPLOAD_FAILED,
)
from core.utils.hashing import compute_fingerprint
from core.utils.mime import detect_mime_type
from core.utils.settings import Settings, get_settings
from core.utils.staging import RawUpload

logger = Logger(UTC=True)


@dataclass(frozen=True)
class _Candidate:
    """A batch item that passed the local checks and still needs storing."""

    index: int
    name: str
    data: bytes
    mime_type: str
    fingerprint: str


class UploadService:
    """Application service responsible for batch uploads.

    This service orchestrates:
    - Size and MIME checks per file
    - Duplicate detection, inside the batch and against stored images
    - Uploading image content to the blob store
    - Persisting image records
    """

    def __init__(
        self,
        repository: ImageRepository | None = None,
        blob_store: BlobStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the upload service with required infrastructure dependencies."""
        self._settings = settings or get_settings()
        self.repository = repository or DynamoDBImageRepository(settings=self._settings)
        self.blob_store = blob_store or S3BlobStore(settings=self._settings)
        self.gate = DuplicateGate(self.repository)

    def handle_batch(
        self,
        items: Sequence[RawUpload],
        *,
        deadline_seconds: float | None = None,
    ) -> BatchUploadResult:
        """Store a batch of uploaded files.

        Args:
            items: Staged uploads, in request order
            deadline_seconds: Time left for the whole batch, if bounded

        Returns:
            One result per input item, in input order

        Raises:
            ValidationError: If the batch is empty or too large
        """
        if not items:
            raise ValidationError(message="No files uploaded", error_code=ERROR_CODE_NO_FILES)

        if len(items) > MAX_BATCH_FILES:
            raise ValidationError(
                message=f"At most {MAX_BATCH_FILES} files can be uploaded at once",
                error_code=ERROR_CODE_TOO_MANY_FILES,
                details={"count": len(items)},
            )

        logger.info("Processing upload batch", extra={"count": len(items)})

        results: list[UploadItemResult | None] = [None] * len(items)
        candidates: list[_Candidate] = []

        for index, item in enumerate(items):
            outcome = self._check_item(index, item)
            if isinstance(outcome, UploadItemResult):
                results[index] = outcome
            else:
                candidates.append(outcome)

        unique, repeats = DuplicateGate.split_batch([c.fingerprint for c in candidates])

        for position in repeats:
            candidate = candidates[position]
            logger.info(
                "Duplicate within batch",
                extra={"file_name": candidate.name, "fingerprint": candidate.fingerprint},
            )
            results[candidate.index] = UploadItemResult.skipped(candidate.name, REASON_DUPLICATE)

        for candidate, result in self._store_all(
            [candidates[position] for position in unique],
            deadline_seconds=deadline_seconds,
        ):
            results[candidate.index] = result

        batch = BatchUploadResult(results=[r for r in results if r is not None])

        logger.info(
            "Upload batch completed",
            extra={
                "stored": len(batch.stored),
                "skipped": batch.skipped_count,
                "failed": batch.failed_count,
            },
        )
        return batch

    @staticmethod
    def _check_item(index: int, item: RawUpload) -> UploadItemResult | _Candidate:
        if item.size > MAX_FILE_SIZE:
            logger.warning("File too large", extra={"file_name": item.name, "size": item.size})
            return UploadItemResult.failed(item.name, REASON_FILE_TOO_LARGE)

        data = item.read()

        try:
            mime_type = detect_mime_type(data)
        except ValueError:
            mime_type = None

        if mime_type not in ALLOWED_MIME_TYPES:
            logger.warning(
                "Unsupported MIME type",
                extra={"file_name": item.name, "declared_type": item.content_type},
            )
            return UploadItemResult.failed(item.name, REASON_UNSUPPORTED_TYPE)

        return _Candidate(
            index=index,
            name=item.name,
            data=data,
            mime_type=mime_type,
            fingerprint=compute_fingerprint(data),
        )

    def _store_all(
        self,
        candidates: list[_Candidate],
        *,
        deadline_seconds: float | None,
    ) -> list[tuple[_Candidate, UploadItemResult]]:
        """Store candidates in parallel, bounding each wait by the item timeout."""
        if not candidates:
            return []

        started = time.monotonic()
        batch_deadline = started + deadline_seconds if deadline_seconds is not None else None
        item_timeout = self._settings.upload_item_timeout_seconds

        pool = ThreadPoolExecutor(
            max_workers=min(self._settings.upload_workers, len(candidates)),
            thread_name_prefix="upload",
        )
        # Set once the caller stops waiting for an item; the worker then stores nothing
        abandoned = [threading.Event() for _ in candidates]
        futures: list[Future[UploadItemResult]] = [
            pool.submit(self._store_one, candidate, flag)
            for candidate, flag in zip(candidates, abandoned)
        ]

        outcomes: list[tuple[_Candidate, UploadItemResult]] = []

        try:
            for candidate, future, flag in zip(candidates, futures, abandoned):
                timeout = item_timeout
                if batch_deadline is not None:
                    timeout = max(0.0, min(timeout, batch_deadline - time.monotonic()))

                try:
                    result = future.result(timeout=timeout)
                except FutureTimeoutError:
                    flag.set()
                    future.cancel()
                    logger.error(
                        "Upload timed out",
                        extra={"file_name": candidate.name, "timeout_seconds": timeout},
                    )
                    result = UploadItemResult.failed(candidate.name, REASON_TIMEOUT)

                outcomes.append((candidate, result))
        finally:
            for flag in abandoned:
                flag.set()
            # Do not block the response on stragglers; queued work is dropped
            pool.shutdown(wait=False, cancel_futures=True)

        return outcomes

    def _store_one(self, candidate: _Candidate, abandoned: threading.Event) -> UploadItemResult:
        name = candidate.name

        if abandoned.is_set():
            return UploadItemResult.failed(name, REASON_TIMEOUT)

        try:
            duplicate = self.gate.is_duplicate(candidate.fingerprint)
        except ImageServiceError:
            logger.exception("Duplicate check failed", extra={"file_name": name})
            return UploadItemResult.failed(name, REASON_STORE_FAILED)

        if duplicate:
            logger.info("Duplicate image detected", extra={"file_name": name})
            return UploadItemResult.skipped(name, REASON_DUPLICATE)

        try:
            receipt = self.blob_store.put(
                fingerprint=candidate.fingerprint,
                file_data=candidate.data,
                mime_type=candidate.mime_type,
            )
        except UpstreamTimeoutError:
            logger.exception("Blob upload timed out", extra={"file_name": name})
            return UploadItemResult.failed(name, REASON_TIMEOUT)
        except ImageServiceError:
            logger.exception("Blob upload failed", extra={"file_name": name})
            return UploadItemResult.failed(name, REASON_UPLOAD_FAILED)

        if abandoned.is_set():
            logger.warning(
                "Upload abandoned after blob write; record not inserted",
                extra={"file_name": name, "orphan_key": receipt.provider_id},
            )
            return UploadItemResult.failed(name, REASON_TIMEOUT)

        return self._insert_record(candidate, receipt)

    def _insert_record(self, candidate: _Candidate, receipt: BlobReceipt) -> UploadItemResult:
        name = candidate.name

        try:
            record = self.repository.insert(
                provider_id=receipt.provider_id,
                url=receipt.url,
                fingerprint=candidate.fingerprint,
                image_name=name,
                mime_type=candidate.mime_type,
                file_size=len(candidate.data),
            )
        except DuplicateImageError:
            # Lost a race with a concurrent upload of the same bytes; the
            # blob key is content-addressed, so the winner owns the object
            logger.info("Duplicate image detected at insert", extra={"file_name": name})
            return UploadItemResult.skipped(name, REASON_DUPLICATE)
        except UpstreamTimeoutError:
            logger.exception(
                "Image record insert timed out; blob left orphaned",
                extra={"file_name": name, "orphan_key": receipt.provider_id},
            )
            return UploadItemResult.failed(name, REASON_TIMEOUT)
        except ImageServiceError:
            logger.exception(
                "Image record insert failed; blob left orphaned",
                extra={"file_name": name, "orphan_key": receipt.provider_id},
            )
            return UploadItemResult.failed(name, REASON_STORE_FAILED)

        logger.info("Image stored", extra={"file_name": name, "image_id": record.image_id})
        return UploadItemResult.stored(name, record)

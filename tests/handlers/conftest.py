import base64
import json
import threading
import time
import uuid
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from core.models.errors import DuplicateImageError, NotFoundError
from core.models.image import ImageRecord
from core.repositories.blob_store import BlobReceipt, BlobStore
from core.utils.settings import Settings
from handlers.upload_images.service import UploadService


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 30_000,
    )


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build a ``POST /upload`` multipart event.

    Usage:
        event = multipart_event([("a.png", png_bytes, "image/png")])
    """

    def _build(
        files: list[tuple[str, bytes, str]],
        *,
        field_name: str = "image",
    ) -> dict[str, Any]:
        boundary = f"----test{uuid.uuid4().hex}"
        body = b""

        for filename, data, content_type in files:
            body += (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{field_name}"; filename="{filename}"\r\n'
                f"Content-Type: {content_type}\r\n\r\n"
            ).encode() + data + b"\r\n"

        body += f"--{boundary}--\r\n".encode()

        return {
            "httpMethod": "POST",
            "path": "/upload",
            "headers": {"Content-Type": f"multipart/form-data; boundary={boundary}"},
            "body": base64.b64encode(body).decode(),
            "isBase64Encoded": True,
        }

    return _build


@pytest.fixture
def like_event() -> Callable[..., dict[str, Any]]:
    def _build(image_id: str | None, source_ip: str = "203.0.113.7") -> dict[str, Any]:
        return {
            "httpMethod": "POST",
            "path": f"/like/{image_id}",
            "pathParameters": {"id": image_id} if image_id else None,
            "headers": {},
            "requestContext": {"identity": {"sourceIp": source_ip}},
        }

    return _build


@pytest.fixture
def comment_event() -> Callable[..., dict[str, Any]]:
    def _build(image_id: str | None, body: Any) -> dict[str, Any]:
        return {
            "httpMethod": "POST",
            "path": f"/comment/{image_id}",
            "pathParameters": {"id": image_id} if image_id else None,
            "headers": {"Content-Type": "application/json"},
            "body": body if isinstance(body, str) else json.dumps(body),
        }

    return _build


class InMemoryImageRepository:
    """Just enough of ImageRepository for service tests."""

    def __init__(self, max_page_size: int = 20) -> None:
        self.max_page_size = max_page_size
        self.records: list[ImageRecord] = []
        self.insert_error: Exception | None = None
        self.page_calls: list[tuple[int, int, str | None]] = []
        self._lock = threading.Lock()

    def insert(self, *, provider_id, url, fingerprint, image_name=None, mime_type=None, file_size=None):
        if self.insert_error:
            raise self.insert_error

        with self._lock:
            if any(r.fingerprint == fingerprint for r in self.records):
                raise DuplicateImageError(message="This image already exists")

            record = ImageRecord(
                image_id=f"img_{uuid.uuid4().hex}",
                provider_id=provider_id,
                url=url,
                fingerprint=fingerprint,
                created_at=f"{len(self.records):06d}",
                image_name=image_name,
                mime_type=mime_type,
                file_size=file_size,
            )
            self.records.append(record)
            return record

    def fingerprint_exists(self, *, fingerprint):
        return any(r.fingerprint == fingerprint for r in self.records)

    def _visible(self, snapshot):
        newest_first = list(reversed(self.records))
        if snapshot is None:
            return newest_first
        return [r for r in newest_first if r.created_at <= snapshot]

    def page(self, *, offset, limit, snapshot=None):
        self.page_calls.append((offset, limit, snapshot))
        visible = self._visible(snapshot)
        limit = min(limit, self.max_page_size)
        return visible[offset : offset + limit], len(visible)

    def count(self, *, snapshot=None):
        return len(self._visible(snapshot))

    def latest_sort_key(self):
        return self.records[-1].created_at if self.records else None

    def get(self, *, image_id):
        for record in self.records:
            if record.image_id == image_id:
                return record
        raise NotFoundError(message="Image not found")


class InMemoryBlobStore(BlobStore):
    def __init__(self, *, error: Exception | None = None, delay: float = 0.0) -> None:
        self.objects: dict[str, bytes] = {}
        self.error = error
        self.delay = delay

    def put(self, *, fingerprint, file_data, mime_type):
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error

        key = f"images/{fingerprint}"
        self.objects[key] = file_data
        return BlobReceipt(provider_id=key, url=f"https://cdn.test/{key}", etag="etag")


@pytest.fixture
def memory_repository() -> InMemoryImageRepository:
    return InMemoryImageRepository()


@pytest.fixture
def blob_store_factory() -> Callable[..., InMemoryBlobStore]:
    """
    Usage:
        store = blob_store_factory(error=StorageError(...), delay=0.5)
    """
    return InMemoryBlobStore


@pytest.fixture
def upload_service_factory(memory_repository) -> Callable[..., UploadService]:
    """
    Build an UploadService over in-memory fakes.

    Usage:
        service = upload_service_factory(blob_store=store, upload_workers=2)
    """

    def _build(
        repository: InMemoryImageRepository | None = None,
        blob_store: BlobStore | None = None,
        **settings: Any,
    ) -> UploadService:
        return UploadService(
            repository=repository or memory_repository,
            blob_store=blob_store or InMemoryBlobStore(),
            settings=Settings(**settings),
        )

    return _build

"""S3-backed implementation of BlobStore."""

from collections.abc import Mapping

from aws_lambda_powertools import Logger
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.infrastructure.aws.aws_errors import client_error_code, is_retryable
from core.models.errors import StorageError, UpstreamTimeoutError
from core.repositories.blob_store import BlobReceipt, BlobStore
from core.utils.constants import ERROR_CODE_IMAGE_UPLOAD_FAILED, MIME_TYPE_EXTENSION_MAP
from core.utils.settings import Settings, get_settings

logger = Logger(UTC=True)


class S3BlobStore(BlobStore):
    """Blob store backed by Amazon S3."""

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._settings = settings or get_settings()
        self._s3: S3AdapterProtocol = adapter or S3Adapter(self._settings)

    def put(
        self,
        *,
        fingerprint: str,
        file_data: bytes,
        mime_type: str,
    ) -> BlobReceipt:
        """Upload image bytes to S3 and return where they live."""
        extension = self._get_extension(mime_type)
        key = f"images/{fingerprint}.{extension}"

        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(file_data)},
        )

        try:
            response = self._s3.put_object(
                key=key,
                body=file_data,
                content_type=mime_type,
                metadata={"fingerprint": fingerprint},
            )

        except (ReadTimeoutError, ConnectTimeoutError) as exc:
            logger.error("S3 upload timed out", extra={"key": key})
            raise UpstreamTimeoutError(
                message="Image storage did not respond in time",
                details={"key": key},
            ) from exc

        except ClientError as exc:
            retryable = is_retryable(exc)
            logger.error(
                "S3 upload failed",
                extra={"key": key, "code": client_error_code(exc), "retryable": retryable},
            )
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
                retryable=retryable,
            ) from exc

        except (EndpointConnectionError, BotoCoreError) as exc:
            logger.exception("S3 connection error", extra={"key": key})
            raise StorageError(
                message="Unable to reach image storage",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
                retryable=isinstance(exc, EndpointConnectionError),
            ) from exc

        etag = self._clean_etag(response)
        url = self.build_url(key)

        logger.info("Image uploaded successfully", extra={"key": key, "etag": etag})
        return BlobReceipt(provider_id=key, url=url, etag=etag)

    def build_url(self, key: str) -> str:
        """Permanent public URL of an object key."""
        if self._settings.public_base_url:
            return f"{self._settings.public_base_url}/{key}"

        return f"https://{self._s3.bucket_name}.s3.{self._s3.region}.amazonaws.com/{key}"

    @staticmethod
    def _clean_etag(response: Mapping[str, object]) -> str | None:
        etag = response.get("ETag")
        return str(etag).strip('"') if etag else None

    @staticmethod
    def _get_extension(mime_type: str) -> str:
        """Return file extension for a given MIME type."""
        extensions = MIME_TYPE_EXTENSION_MAP.get(mime_type)
        return extensions[0] if extensions else "bin"

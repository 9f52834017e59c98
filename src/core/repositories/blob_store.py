"""Abstract contract for the external blob store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class BlobReceipt:
    """What the blob store hands back after a durable write."""

    provider_id: str
    url: str
    etag: str | None = None


class BlobStore(ABC):
    """Contract for storing raw image bytes.

    Implementations could be S3, GCS, an image-hosting SaaS, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def put(
        self,
        *,
        fingerprint: str,
        file_data: bytes,
        mime_type: str,
    ) -> BlobReceipt:
        """Store bytes durably and return their permanent location.

        Objects are content-addressed: the location derives from the
        fingerprint, so writing the same bytes twice targets one object.

        Args:
            fingerprint: Content fingerprint of ``file_data``
            file_data: Binary image content
            mime_type: MIME type (e.g., 'image/jpeg')

        Returns:
            BlobReceipt with provider id, permanent URL and etag

        Raises:
            StorageError: If the write fails (``retryable`` tells transient
                from permanent failures)
            UpstreamTimeoutError: If the store does not answer in time
        """

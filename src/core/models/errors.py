"""Custom exception classes for the image service."""

from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    ERROR_CODE_ALREADY_LIKED,
    ERROR_CODE_DYNAMODB,
    ERROR_CODE_IMAGE_DUPLICATE_IMAGE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_S3,
    ERROR_CODE_UPSTREAM,
    ERROR_CODE_UPSTREAM_TIMEOUT,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    `http_status` is the status used when the error reaches the API edge.
    """

    http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    http_status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested resource is not found."""

    http_status = HTTPStatus.NOT_FOUND

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DuplicateImageError(ImageServiceError):
    """Raised when an image with the same content fingerprint already exists."""

    http_status = HTTPStatus.CONFLICT

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_DUPLICATE_IMAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class AlreadyLikedError(ImageServiceError):
    """Raised when the same source likes the same image twice."""

    http_status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_ALREADY_LIKED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UpstreamError(ImageServiceError):
    """Raised when a backing service (blob store or database) fails.

    `retryable` tells callers whether the same request may succeed later.
    """

    http_status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UPSTREAM,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        self.retryable = retryable
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(UpstreamError):
    """Raised when an image storage operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_S3,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            retryable=retryable,
        )


class DatabaseError(UpstreamError):
    """Raised when a DynamoDB operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_DYNAMODB,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            retryable=retryable,
        )


class UpstreamTimeoutError(UpstreamError):
    """Raised when a backing service does not answer in time."""

    http_status = HTTPStatus.GATEWAY_TIMEOUT

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UPSTREAM_TIMEOUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            retryable=True,
        )

"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_NO_FILES = "NO_FILES"
ERROR_CODE_TOO_MANY_FILES = "TOO_MANY_FILES"
ERROR_CODE_INVALID_COMMENT = "INVALID_COMMENT"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Conflict Errors
ERROR_CODE_IMAGE_DUPLICATE_IMAGE = "DUPLICATE_IMAGE_ERROR"
ERROR_CODE_ALL_DUPLICATES = "ALL_DUPLICATES"
ERROR_CODE_ALREADY_LIKED = "ALREADY_LIKED"

# Storage Errors
ERROR_CODE_UPSTREAM = "UPSTREAM_ERROR"
ERROR_CODE_S3 = "S3_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"

# Metadata / DynamoDB Errors
ERROR_CODE_DYNAMODB = "DYNAMODB_ERROR"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_DUPLICATE_CHECK_FAILED = "METADATA_DUPLICATE_CHECK_FAILED"
ERROR_CODE_LIKE_FAILED = "LIKE_FAILED"
ERROR_CODE_COMMENT_FAILED = "COMMENT_FAILED"

# Batch upload
ERROR_CODE_UPLOAD_FAILED = "UPLOAD_FAILED"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Upload Item Outcomes
# ============================================================================

OUTCOME_STORED = "stored"
OUTCOME_SKIPPED = "skipped"
OUTCOME_FAILED = "failed"

REASON_DUPLICATE = "duplicate"
REASON_UNSUPPORTED_TYPE = "unsupported_type"
REASON_FILE_TOO_LARGE = "file_too_large"
REASON_UPLOAD_FAILED = "upload_failed"
REASON_STORE_FAILED = "store_failed"
REASON_TIMEOUT = "timeout"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 4 * 1024 * 1024  # 4MB in bytes
MAX_BATCH_FILES = 10
UPLOAD_FIELD_NAME = "image"
SPOOL_MAX_MEMORY = 512 * 1024

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())


# ============================================================================
# Comment Constraints
# ============================================================================

COMMENT_MAX_LENGTH = 1000
AUTHOR_MAX_LENGTH = 100

# ============================================================================
# Pagination Constraints
# ============================================================================

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Repository-level clamp (``MAX_PAGE_SIZE`` env) and its hard ceiling
DEFAULT_REPOSITORY_PAGE_SIZE = 20
REPOSITORY_PAGE_SIZE_HARD_CAP = 500
DEFAULT_QUERY_BATCH_SIZE = 100

# ============================================================================
# DynamoDB Layout
# ============================================================================

PK_ATTRIBUTE = "pk"
IMAGE_KEY_PREFIX = "IMAGE#"
FINGERPRINT_KEY_PREFIX = "FINGERPRINT#"
LIKE_KEY_PREFIX = "LIKE#"
GALLERY_PARTITION = "GALLERY"
GALLERY_INDEX_NAME = "gallery-sort-index"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
UNKNOWN_SOURCE = "unknown"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
ENV_IMAGE_PUBLIC_BASE_URL = "IMAGE_PUBLIC_BASE_URL"
ENV_MAX_PAGE_SIZE = "MAX_PAGE_SIZE"
ENV_QUERY_BATCH_SIZE = "QUERY_BATCH_SIZE"
ENV_UPLOAD_WORKERS = "UPLOAD_WORKERS"
ENV_UPLOAD_ITEM_TIMEOUT_SECONDS = "UPLOAD_ITEM_TIMEOUT_SECONDS"
ENV_AWS_CONNECT_TIMEOUT_SECONDS = "AWS_CONNECT_TIMEOUT_SECONDS"
ENV_AWS_READ_TIMEOUT_SECONDS = "AWS_READ_TIMEOUT_SECONDS"
ENV_AWS_MAX_ATTEMPTS = "AWS_MAX_ATTEMPTS"
ENV_CORS_ALLOWED_ORIGIN = "CORS_ALLOWED_ORIGIN"
DEFAULT_AWS_REGION = "us-east-1"

# ============================================================================
# Observability
# ============================================================================

METRICS_NAMESPACE = "ImageGallery"

# Reserve for response serialization once the Lambda deadline approaches
LAMBDA_DEADLINE_MARGIN_SECONDS = 1.0

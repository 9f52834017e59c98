"""Fixtures for the end-to-end suite against a LocalStack deployment."""

import logging
import uuid

import boto3
import pytest
import requests
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

S3_IMAGE_BUCKET_NAME = "image-gallery-images-snd"
DYNAMODB_TABLE_NAME = "image-gallery-metadata-snd"
ENDPOINT_BASE_URL = "http://localhost:4566"

REACHABILITY_CONFIG = Config(connect_timeout=2, read_timeout=5, retries={"max_attempts": 1})


def pytest_collection_modifyitems(items):
    for item in items:
        if "e2e" in item.path.parts:
            item.add_marker(pytest.mark.e2e)


class E2EAPIClient:
    """Wrapper for making HTTP requests to the API"""

    def __init__(self, endpoint, headers):
        self.endpoint = endpoint
        self.headers = headers

    def _headers(self, headers=None):
        h = self.headers.copy()
        if headers:
            h.update(headers)
        return h

    def post(self, path, data=None, headers=None):
        """Make JSON POST request"""
        url = f"{self.endpoint}{path}"
        return requests.post(url, json=data, headers=self._headers(headers), timeout=30)

    def upload(self, files, headers=None):
        """POST files to /upload as multipart/form-data.

        ``files`` is a list of (filename, bytes, content_type) tuples.
        """
        url = f"{self.endpoint}/upload"
        multipart = [("image", (name, data, content_type)) for name, data, content_type in files]
        return requests.post(url, files=multipart, headers=self._headers(headers), timeout=30)

    def get(self, path, params=None, headers=None):
        """Make GET request"""
        url = f"{self.endpoint}{path}"
        return requests.get(url, params=params, headers=self._headers(headers), timeout=30)


# ============================================================================
# API Details Fixture
# ============================================================================


@pytest.fixture(scope="session")
def api_details():
    """Get API Gateway details from LocalStack"""
    try:
        apigateway = boto3.client("apigateway", endpoint_url=ENDPOINT_BASE_URL, config=REACHABILITY_CONFIG)

        apis = apigateway.get_rest_apis()
        api = next(api for api in apis["items"] if "image-gallery" in api["name"])
        endpoint = f"{ENDPOINT_BASE_URL}/restapis/{api['id']}/snd/_user_request_"

        return {"api_id": api["id"], "endpoint": endpoint, "stage": "snd"}
    except (BotoCoreError, ClientError, StopIteration) as e:
        logger.warning("Could not get API details from LocalStack: %s", e)
        pytest.skip(f"Could not get API details from LocalStack: {e}")


@pytest.fixture
def api_client(api_details):
    """HTTP client wrapper for E2E API testing"""
    return E2EAPIClient(api_details["endpoint"], {})


@pytest.fixture(scope="function", autouse=True)
def cleanup_storage_after_each_test(api_details):
    """Clean S3 and DynamoDB to prevent test data leakage."""
    yield
    _cleanup_s3()
    _cleanup_dynamodb()


def _cleanup_s3():
    """Clean all objects from S3 bucket"""
    s3_client = boto3.client("s3", endpoint_url=ENDPOINT_BASE_URL)

    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=S3_IMAGE_BUCKET_NAME):
            for obj in page.get("Contents", []):
                s3_client.delete_object(Bucket=S3_IMAGE_BUCKET_NAME, Key=obj["Key"])
    except ClientError as err:
        logger.error("Failed to cleanup S3 bucket: %s", S3_IMAGE_BUCKET_NAME, exc_info=err)


def _cleanup_dynamodb():
    """Delete every item (images, fingerprint guards, likes) from the table."""
    table = boto3.resource("dynamodb", endpoint_url=ENDPOINT_BASE_URL).Table(DYNAMODB_TABLE_NAME)

    try:
        scan_kwargs = {"ProjectionExpression": "pk"}
        while True:
            response = table.scan(**scan_kwargs)
            with table.batch_writer() as batch:
                for item in response.get("Items", []):
                    batch.delete_item(Key={"pk": item["pk"]})

            start_key = response.get("LastEvaluatedKey")
            if not start_key:
                break
            scan_kwargs["ExclusiveStartKey"] = start_key
    except ClientError as err:
        logger.error("Failed to cleanup DynamoDB table: %s", DYNAMODB_TABLE_NAME, exc_info=err)


# ============================================================================
# Sample Image Data
# ============================================================================


@pytest.fixture
def png_factory():
    """Distinct minimal PNG payloads per call."""

    def _make() -> bytes:
        return b"\x89PNG\r\n\x1a\n" + uuid.uuid4().bytes

    return _make

"""Thin DynamoDB adapter wrapping boto3 table operations."""

from typing import Any, Protocol, cast

import boto3

from core.infrastructure.adapters.client_config import build_client_config
from core.utils.constants import ENV_IMAGE_METADATA_TABLE_NAME
from core.utils.settings import Settings, get_settings


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    name: str

    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Minimal DynamoDB adapter protocol (repository-facing)."""

    table_name: str

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]: ...

    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def query(self, **kwargs: Any) -> dict[str, Any]: ...

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 DynamoDB resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize DynamoDB table from environment."""
        settings = settings or get_settings()
        if not settings.table_name:
            raise RuntimeError(
                f"{ENV_IMAGE_METADATA_TABLE_NAME} environment variable is not set"
            )

        self.table_name = settings.table_name

        dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=settings.endpoint_url,
            region_name=settings.region,
            config=build_client_config(settings),
        )

        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(settings.table_name),
        )
        # The resource's client accepts native Python values, like the table
        self._client = dynamodb.meta.client

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=consistent_read)

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        """Apply an update expression to a single item.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(**kwargs)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB query.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.query(**kwargs)

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]:
        """Execute several writes atomically.

        Each entry is a ``{"Put" | "Update" | ...: {...}}`` request without a
        table name; the adapter's table is filled in.
        Raises boto3 exceptions - caught by domain implementation.
        """
        transact_items = [
            {action: {**request, "TableName": self.table_name} for action, request in entry.items()}
            for entry in items
        ]
        return cast(
            dict[str, Any],
            self._client.transact_write_items(TransactItems=transact_items),
        )

"""Thin DynamoDB adapter wrapping boto3 table operations."""

import os
from typing import Any, Protocol, cast

import boto3
from botocore.config import Config

from core.utils.constants import (
    DEFAULT_AWS_REGION,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_REGISTRY_TABLE_NAME,
    REGISTRY_CONNECT_TIMEOUT,
    REGISTRY_MAX_POOL_CONNECTIONS,
    REGISTRY_READ_TIMEOUT,
)


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    name: str

    def put_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def delete_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def scan(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Registry-facing adapter protocol."""

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]: ...

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...

    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...

    def batch_get_item(self, *, keys: list[dict[str, Any]]) -> dict[str, Any]: ...

    def scan(self, **kwargs: Any) -> dict[str, Any]: ...


def registry_client_config() -> Config:
    """Client configuration for registry calls.

    Connection acquisition and reads are bounded so an unreachable table
    fails fast instead of queueing. Botocore retries are disabled: the
    allocation loop owns retry policy.
    """
    return Config(
        connect_timeout=REGISTRY_CONNECT_TIMEOUT,
        read_timeout=REGISTRY_READ_TIMEOUT,
        max_pool_connections=REGISTRY_MAX_POOL_CONNECTIONS,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 DynamoDB resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, table_name: str | None = None) -> None:
        """Initialize DynamoDB table from environment."""
        table_name = table_name or os.getenv(ENV_IMAGE_REGISTRY_TABLE_NAME)
        if not table_name:
            raise RuntimeError(
                f"{ENV_IMAGE_REGISTRY_TABLE_NAME} environment variable is not set"
            )

        self._dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION, DEFAULT_AWS_REGION),
            config=registry_client_config(),
        )

        self.table_name = table_name
        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            self._dynamodb.Table(table_name),
        )

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Item": item}

        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        return self.table.put_item(**kwargs)

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=True)

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        """Update item attributes.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(**kwargs)

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        """Delete item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.delete_item(Key=key)

    def batch_get_item(self, *, keys: list[dict[str, Any]]) -> dict[str, Any]:
        """Fetch up to 100 items by key in one round trip.

        Returns the raw response; the caller handles `UnprocessedKeys`.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response: dict[str, Any] = self._dynamodb.batch_get_item(
            RequestItems={self.table_name: {"Keys": keys, "ConsistentRead": True}},
        )
        return response

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        """Execute one page of a table scan.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.scan(**kwargs)

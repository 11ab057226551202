"""
Pytest configuration and fixtures for image host tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup.
"""

import base64
import os
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_REGISTRY_TABLE_NAME", "image-host-registry-test")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "image-host-images-test")
os.environ.setdefault("IMAGE_STORAGE_BACKEND", "s3")
os.environ.setdefault("IMAGE_HOST_SECRET", "test-secret")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageHostTest")

TEST_SECRET = os.environ["IMAGE_HOST_SECRET"]


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_registry_table(dynamodb_resource):
    """Helper to create the registry table (keyed by image_id only)."""
    return dynamodb_resource.create_table(
        TableName=os.getenv("IMAGE_REGISTRY_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "image_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "image_id", "AttributeType": "S"}],
    )


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """
    Create the registry table for one test.

    moto discards the table when the mock context exits.
    """
    table_name = os.getenv("IMAGE_REGISTRY_TABLE_NAME")

    try:
        table = dynamodb_resource.Table(table_name)
        table.load()
    except ClientError:
        table = _create_registry_table(dynamodb_resource)
        table.wait_until_exists()

    yield table


@pytest.fixture
def dynamodb_put_item(dynamodb_table) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """
    Helper to insert a single registry item.

    Usage:
        item = dynamodb_put_item({"image_id": "abc123", "extension": ".png"})
    """

    def _put(item: dict[str, Any]) -> dict[str, Any]:
        dynamodb_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture
def dynamodb_get_item(dynamodb_table) -> Callable[[str], dict[str, Any] | None]:
    """
    Helper to get a single registry item.

    Usage:
        item = dynamodb_get_item("abc123")
    """

    def _get(image_id: str) -> dict[str, Any] | None:
        response: dict[str, Any] = dynamodb_table.get_item(Key={"image_id": image_id})
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


@pytest.fixture
def dynamodb_count(dynamodb_table) -> Callable[[], int]:
    """Helper returning the number of registry items."""

    def _count() -> int:
        return int(dynamodb_table.scan(Select="COUNT")["Count"])

    return _count


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the image bucket for one test."""
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("images/abc123.png", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("images/abc123.png")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_client.get_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
        )
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_object_exists(s3_client) -> Callable[[str], bool]:
    """Helper telling whether a key is present in the bucket."""

    def _exists(key: str) -> bool:
        try:
            s3_client.head_object(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"), Key=key)
            return True
        except ClientError:
            return False

    return _exists


@pytest.fixture
def aws_resources(dynamodb_table, s3_bucket):
    """Registry table and image bucket, both mocked."""
    return dynamodb_table, s3_bucket


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG header bytes."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"

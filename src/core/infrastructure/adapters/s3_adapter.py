"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    DEFAULT_AWS_REGION,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
    IMMUTABLE_CACHE_CONTROL,
    OBJECT_STORE_CONNECT_TIMEOUT,
    OBJECT_STORE_READ_TIMEOUT,
)


class _Boto3S3Client(Protocol):
    """The slice of the boto3 S3 client the adapter calls."""

    def put_object(self, **kwargs: Any) -> Any: ...
    def get_object(self, **kwargs: Any) -> Mapping[str, Any]: ...
    def head_object(self, **kwargs: Any) -> Mapping[str, Any]: ...
    def delete_object(self, **kwargs: Any) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Object-store-facing S3 adapter protocol."""

    def put_object(self, *, key: str, body: bytes, content_type: str) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...


def object_store_client_config() -> Config:
    """Bounded timeouts so a stalled bucket surfaces as a failed write."""
    return Config(
        connect_timeout=OBJECT_STORE_CONNECT_TIMEOUT,
        read_timeout=OBJECT_STORE_READ_TIMEOUT,
        retries={"max_attempts": 3, "mode": "standard"},
    )


class S3Adapter:
    """Low-level S3 operations on the image bucket.

    Objects are written once under a fresh identifier and never rewritten,
    so every put carries an immutable Cache-Control header. Errors are not
    handled here; `S3ImageStorage` translates them.
    """

    def __init__(self, bucket_name: str | None = None) -> None:
        bucket_name = bucket_name or os.getenv(ENV_IMAGE_S3_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_IMAGE_S3_BUCKET_NAME} environment variable is not set")

        self.bucket_name = bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION, DEFAULT_AWS_REGION),
            config=object_store_client_config(),
        )

    def put_object(self, *, key: str, body: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=body,
            ContentType=content_type,
            CacheControl=IMMUTABLE_CACHE_CONTROL,
        )

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        return self._client.get_object(Bucket=self.bucket_name, Key=key)

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Raises ClientError with code 404 when the key is absent."""
        return self._client.head_object(Bucket=self.bucket_name, Key=key)

    def delete_object(self, *, key: str) -> None:
        """S3 reports success for absent keys, so this is idempotent."""
        self._client.delete_object(Bucket=self.bucket_name, Key=key)

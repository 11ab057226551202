"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

import string
from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_EXTENSION = "INVALID_EXTENSION"
ERROR_CODE_INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"

# Auth Errors
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Allocation Errors
ERROR_CODE_DUPLICATE_CANDIDATE = "DUPLICATE_CANDIDATE"
ERROR_CODE_ALLOCATION_EXHAUSTED = "ALLOCATION_EXHAUSTED"

# Object Store Errors
ERROR_CODE_OBJECT_STORE = "OBJECT_STORE_ERROR"
ERROR_CODE_OBJECT_WRITE_FAILED = "OBJECT_STORE_WRITE_FAILED"
ERROR_CODE_OBJECT_READ_FAILED = "OBJECT_STORE_READ_FAILED"
ERROR_CODE_OBJECT_DELETE_FAILED = "OBJECT_STORE_DELETE_FAILED"

# Registry / DynamoDB Errors
ERROR_CODE_REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
ERROR_CODE_REGISTRY_CLAIM_FAILED = "REGISTRY_CLAIM_FAILED"
ERROR_CODE_REGISTRY_FETCH_FAILED = "REGISTRY_FETCH_FAILED"
ERROR_CODE_REGISTRY_UPDATE_FAILED = "REGISTRY_UPDATE_FAILED"
ERROR_CODE_REGISTRY_DELETE_FAILED = "REGISTRY_DELETE_FAILED"
ERROR_CODE_REGISTRY_SCAN_FAILED = "REGISTRY_SCAN_FAILED"
ERROR_CODE_REGISTRY_INVALID_FORMAT = "REGISTRY_INVALID_FORMAT"


# ============================================================================
# Identifier Allocation
# ============================================================================

IDENTIFIER_ALPHABET: Final[str] = string.ascii_letters + string.digits
IDENTIFIER_PATTERN = r"^[a-zA-Z0-9]+$"
DEFAULT_IDENTIFIER_LENGTH = 6
MAX_ALLOCATION_TRIES = 10


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 4 * 1024 * 1024  # 4MB in bytes
MAX_BATCH_SIZE = 100

EXTENSION_MIME_TYPE_MAP: Final[dict[str, str]] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(EXTENSION_MIME_TYPE_MAP.keys())

DEFAULT_BINARY_CONTENT_TYPE = "application/octet-stream"


# ============================================================================
# Storage Layout
# ============================================================================

IMAGE_KEY_PREFIX = "images"
STORAGE_BACKEND_S3 = "s3"
STORAGE_BACKEND_LOCAL = "local"
DEFAULT_STORAGE_ROOT = "images"


# ============================================================================
# AWS Clients
# ============================================================================

REGISTRY_CONNECT_TIMEOUT = 2  # seconds
REGISTRY_READ_TIMEOUT = 5  # seconds
REGISTRY_MAX_POOL_CONNECTIONS = 10
REGISTRY_BATCH_GET_MAX_ROUNDS = 5

OBJECT_STORE_CONNECT_TIMEOUT = 2  # seconds
OBJECT_STORE_READ_TIMEOUT = 10  # seconds


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization"
EXPOSE_HEADERS = "Content-Type,Content-Length,Location"
DEFAULT_CONTENT_TYPE = "application/json"
# Identifiers are never reused for different content.
IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"
AUTHORIZATION_HEADER = "authorization"

# ============================================================================
# Metrics
# ============================================================================

METRICS_NAMESPACE = "ImageHost"
METRIC_RESPONSE_COUNT = "ResponseCount"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
DEFAULT_AWS_REGION = "us-east-1"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_REGISTRY_TABLE_NAME = "IMAGE_REGISTRY_TABLE_NAME"
ENV_IMAGE_STORAGE_BACKEND = "IMAGE_STORAGE_BACKEND"
ENV_IMAGE_STORAGE_ROOT = "IMAGE_STORAGE_ROOT"
ENV_IMAGE_ID_LENGTH = "IMAGE_ID_LENGTH"
ENV_IMAGE_HOST_SECRET = "IMAGE_HOST_SECRET"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def mime_type_for_extension(extension: str) -> str:
    """Return the Content-Type served for a stored extension."""
    return EXTENSION_MIME_TYPE_MAP.get(extension.lower(), DEFAULT_BINARY_CONTENT_TYPE)

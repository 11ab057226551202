"""Custom exception classes for the image host.

Each subclass carries a `default_error_code`; the code is what API
responses report in their `error` field, and `ResponseBuilder.from_error`
picks the HTTP status from the class.
"""

from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_ALLOCATION_EXHAUSTED,
    ERROR_CODE_DUPLICATE_CANDIDATE,
    ERROR_CODE_INVALID_EXTENSION,
    ERROR_CODE_INVALID_IDENTIFIER,
    ERROR_CODE_OBJECT_STORE,
    ERROR_CODE_OBJECT_WRITE_FAILED,
    ERROR_CODE_REGISTRY_UNAVAILABLE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_UNAUTHORIZED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image host errors.

    All custom errors must inherit from this class. The base class has no
    default code, so raising it directly requires an explicit `error_code`.
    Optional contextual information can be supplied via `details`.
    """

    default_error_code: ClassVar[str | None] = None

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        code = error_code or self.default_error_code
        if code is None:
            raise TypeError(f"{type(self).__name__} requires an error_code")

        self.message = message
        self.error_code = code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class InvalidExtensionError(ValidationError):
    """Raised when a file extension is not on the allow-list."""

    default_error_code = ERROR_CODE_INVALID_EXTENSION


class InvalidIdentifierError(ValidationError):
    """Raised when a caller-supplied identifier is unsafe or malformed."""

    default_error_code = ERROR_CODE_INVALID_IDENTIFIER


class MIMETypeError(ValidationError):
    """Raised when uploaded content is not a supported image."""

    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE


class UnauthorizedError(ImageServiceError):
    """Raised when the shared secret is missing or wrong."""

    default_error_code = ERROR_CODE_UNAUTHORIZED

    def __init__(self, *, message: str = "Unauthorized", **kwargs: Any) -> None:
        super().__init__(message=message, **kwargs)


class NotFoundError(ImageServiceError):
    """Raised when a requested image or record does not exist."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class DuplicateCandidateError(ImageServiceError):
    """Raised when a claimed identifier is already present in the registry."""

    default_error_code = ERROR_CODE_DUPLICATE_CANDIDATE


class AllocationExhaustedError(ImageServiceError):
    """Raised when every allocation attempt collided with an existing identifier."""

    default_error_code = ERROR_CODE_ALLOCATION_EXHAUSTED


class RegistryUnavailableError(ImageServiceError):
    """Raised when the identifier registry cannot be reached or fails."""

    default_error_code = ERROR_CODE_REGISTRY_UNAVAILABLE


class ObjectStoreError(ImageServiceError):
    """Raised when an object store operation fails."""

    default_error_code = ERROR_CODE_OBJECT_STORE


class ObjectStoreWriteFailedError(ObjectStoreError):
    """Raised when image bytes could not be written to the object store."""

    default_error_code = ERROR_CODE_OBJECT_WRITE_FAILED

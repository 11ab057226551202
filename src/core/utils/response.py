"""
Centralized API response builder for AWS Lambda / API Gateway.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.models.errors import (
    AllocationExhaustedError,
    ImageServiceError,
    NotFoundError,
    ObjectStoreError,
    RegistryUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]

# Most specific class first.
_DOMAIN_ERROR_STATUS: tuple[tuple[type[ImageServiceError], HTTPStatus], ...] = (
    (ValidationError, HTTPStatus.BAD_REQUEST),
    (UnauthorizedError, HTTPStatus.UNAUTHORIZED),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (AllocationExhaustedError, HTTPStatus.SERVICE_UNAVAILABLE),
    (RegistryUnavailableError, HTTPStatus.SERVICE_UNAVAILABLE),
    (ObjectStoreError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    DEFAULT_CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)
        headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)

        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin

        return headers

    @staticmethod
    def _response(
        *,
        status: HTTPStatus,
        body: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {}

        if body:
            payload.update(body)

        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(payload),
        }

    @staticmethod
    def ok(body: JsonDict, **options: Any) -> JsonDict:
        return ResponseBuilder._response(status=HTTPStatus.OK, body=body, **options)

    @staticmethod
    def created(body: JsonDict, **options: Any) -> JsonDict:
        return ResponseBuilder._response(status=HTTPStatus.CREATED, body=body, **options)

    @staticmethod
    def no_content(*, cors_origin: str | None = None) -> JsonDict:
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": "",
        }

    @staticmethod
    def redirect(location: str, *, cors_origin: str | None = None) -> JsonDict:
        """302 Found pointing at an external attribution URL."""
        headers = ResponseBuilder._build_headers(cors_origin)
        headers["Location"] = location

        return {"statusCode": HTTPStatus.FOUND.value, "headers": headers, "body": ""}

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: Any = None,
        **options: Any,
    ) -> JsonDict:
        """JSON error envelope; `error` defaults to the status name."""
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return ResponseBuilder._response(status=status, body=payload, **options)

    @staticmethod
    def from_error(exc: ImageServiceError, **options: Any) -> JsonDict:
        """Map a domain error onto its HTTP status, keeping its error code."""
        status = next(
            (mapped for error_type, mapped in _DOMAIN_ERROR_STATUS if isinstance(exc, error_type)),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )
        return ResponseBuilder.error(
            status=status,
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
            **options,
        )

    @staticmethod
    def bad_request(message: str, **options: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.BAD_REQUEST, message=message, **options)

    @staticmethod
    def validation_error(*, message: str, **options: Any) -> JsonDict:
        """422 carrying pydantic's error list in `details`."""
        return ResponseBuilder.error(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            error=ERROR_CODE_VALIDATION_FAILED,
            message=message,
            **options,
        )

    @staticmethod
    def not_found(message: str = "Resource not found", **options: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.NOT_FOUND, message=message, **options)

    @staticmethod
    def service_unavailable(message: str = "Service unavailable", **options: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.SERVICE_UNAVAILABLE, message=message, **options)

    @staticmethod
    def internal_error(message: str = "Internal server error", **options: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.INTERNAL_SERVER_ERROR, message=message, **options)

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
            "Access-Control-Expose-Headers": EXPOSE_HEADERS,
        }

        if cors_origin:
            response_headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }

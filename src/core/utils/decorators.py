"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import hmac
import os
import traceback
from collections.abc import Callable, Mapping
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, single_metric
from aws_lambda_powertools.metrics import MetricUnit

from core.models.errors import ImageServiceError, UnauthorizedError
from core.utils.constants import (
    AUTHORIZATION_HEADER,
    ENV_IMAGE_HOST_SECRET,
    METRIC_RESPONSE_COUNT,
    METRICS_NAMESPACE,
)
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]


def _get_user_friendly_message(exc: Exception) -> str:
    """
    Convert technical exception messages into user-friendly ones.

    Preserves specific validation messages while making generic errors friendly.
    """
    exc_str = str(exc)

    friendly_prefixes = (
        "Invalid",
        "Missing",
        "Required",
        "Must",
        "Cannot",
        "Unable to",
        "Image",
        "File",
    )

    if exc_str and any(exc_str.startswith(prefix) for prefix in friendly_prefixes):
        return exc_str

    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."

    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."

    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."

    return "We encountered an issue processing your request. Please try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """Log error with consistent structure and full context."""
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def _record_status(status_code: int) -> None:
    """Count one response per status code."""
    with single_metric(
        name=METRIC_RESPONSE_COUNT,
        unit=MetricUnit.Count,
        value=1,
        namespace=METRICS_NAMESPACE,
    ) as metric:
        metric.add_dimension(name="status_code", value=str(status_code))


def _dispatch(
    func: Callable[..., JsonDict],
    event: Any,
    context: Any,
    *,
    request_id: str | None,
    cors_origin: str | None,
) -> JsonDict:
    try:
        return func(event, context)

    # Domain errors carry their own status mapping
    except ImageServiceError as exc:
        _log_error(
            "Domain error in handler",
            handler_name=func.__name__,
            request_id=request_id,
            exc=exc,
        )
        return ResponseBuilder.from_error(
            exc,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    # Client errors (4xx) - Bad Request
    except (
        ValueError,
        KeyError,
        TypeError,
        AttributeError,
    ) as exc:
        _log_error(
            "Validation error in handler",
            handler_name=func.__name__,
            request_id=request_id,
            exc=exc,
        )
        return ResponseBuilder.bad_request(
            _get_user_friendly_message(exc),
            request_id=request_id,
            cors_origin=cors_origin,
        )

    # Server errors (5xx) - Timeout
    except TimeoutError as exc:
        _log_error(
            "Request timeout",
            handler_name=func.__name__,
            request_id=request_id,
            exc=exc,
            level="exception",
        )
        return ResponseBuilder.error(
            message="The request took too long to process. Please try again.",
            status=HTTPStatus.GATEWAY_TIMEOUT,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    # Server errors (5xx) - Connection/Network issues
    except (ConnectionError, OSError) as exc:
        _log_error(
            "Connection error",
            handler_name=func.__name__,
            request_id=request_id,
            exc=exc,
            level="exception",
        )
        return ResponseBuilder.service_unavailable(
            "Unable to connect to required services. Please try again later.",
            request_id=request_id,
            cors_origin=cors_origin,
        )

    except Exception as exc:
        _log_error(
            "Unexpected error in handler",
            handler_name=func.__name__,
            request_id=request_id,
            exc=exc,
            level="exception",
        )
        return ResponseBuilder.internal_error(
            "We're experiencing technical difficulties. Please try again in a few moments.",
            request_id=request_id,
            cors_origin=cors_origin,
        )


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Mapping of domain errors and stray exceptions to error responses
    - Request ID tracking and structured logging
    - One `ResponseCount` metric per response, dimensioned by status code

    Example:
        @api_gateway_handler
        def lambda_handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        response = _dispatch(
            func,
            event,
            context,
            request_id=request_id,
            cors_origin=cors_origin,
        )
        _record_status(response["statusCode"])
        return response

    return wrapper


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def verify_shared_secret(headers: Mapping[str, str] | None) -> None:
    """Compare the Authorization header with the configured shared secret.

    Fails closed: when no secret is configured every request is rejected.

    Raises:
        UnauthorizedError: If the header is missing or does not match
    """
    secret = os.getenv(ENV_IMAGE_HOST_SECRET)
    if not secret:
        logger.warning(f"{ENV_IMAGE_HOST_SECRET} is not set; rejecting request")
        raise UnauthorizedError()

    supplied = _header(headers, AUTHORIZATION_HEADER)
    if supplied is None or not hmac.compare_digest(supplied.encode(), secret.encode()):
        raise UnauthorizedError()


def require_shared_secret(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """Reject the event with 401 unless it carries the shared secret."""

    @wraps(func)
    def wrapper(event: Any, context: Any, *args: Any, **kwargs: Any) -> JsonDict:
        verify_shared_secret(event.get("headers"))
        return func(event, context, *args, **kwargs)

    return wrapper

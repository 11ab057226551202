"""
Lambda handler serving stored image bytes.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import (
    InvalidIdentifierError,
    NotFoundError,
    ObjectStoreError,
    RegistryUnavailableError,
)
from core.services.metadata import MetadataService
from core.utils.constants import IMMUTABLE_CACHE_CONTROL, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `GET /images/{filename}`.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        The image bytes as a base64 binary response, or 404.
    """
    logger.info(
        "Received image view request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            GetImageRequest,
            {"filename": path_params.get("filename")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors(include_url=False, include_context=False)},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = MetadataService()

    try:
        content, content_type, _ = service.open_image(request.filename)

    except (InvalidIdentifierError, NotFoundError):
        logger.warning("Image not found", extra={"filename": request.filename})
        return ResponseBuilder.not_found(f"Image not found: {request.filename}")

    except (RegistryUnavailableError, ObjectStoreError) as exc:
        logger.exception("Get image failed", extra={"filename": request.filename})
        return ResponseBuilder.from_error(exc)

    return ResponseBuilder.binary_response(
        content,
        content_type=content_type,
        headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL},
    )

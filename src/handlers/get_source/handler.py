"""
Lambda handler resolving an image to its attribution.
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
from core.models.image import ResolutionKind
from core.services.metadata import MetadataService
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetSourceRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `GET /source/{filename}`.

    - attribution recorded: 302 to it
    - no attribution: the stored image itself
    - unknown image: 404
    """
    logger.info(
        "Received source lookup request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            GetSourceRequest,
            {"filename": path_params.get("filename")},
        )
    except ValidationError as exc:
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = MetadataService()

    try:
        resolution = service.resolve_source(request.filename)

        if resolution.kind is ResolutionKind.REDIRECT and resolution.target:
            logger.info("Redirecting to source", extra={"filename": request.filename})
            return ResponseBuilder.redirect(resolution.target)

        if resolution.kind is ResolutionKind.NOT_FOUND or resolution.record is None:
            return ResponseBuilder.not_found(f"Image not found: {request.filename}")

        content, content_type = service.storage.read(
            image_id=resolution.record.image_id,
            extension=resolution.record.extension,
        )

    except (InvalidIdentifierError, NotFoundError):
        logger.warning("Image not found", extra={"filename": request.filename})
        return ResponseBuilder.not_found(f"Image not found: {request.filename}")

    except (RegistryUnavailableError, ObjectStoreError) as exc:
        logger.exception("Source lookup failed", extra={"filename": request.filename})
        return ResponseBuilder.from_error(exc)

    return ResponseBuilder.binary_response(content, content_type=content_type)

"""
Lambda handler responsible for deleting image resources.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import InvalidIdentifierError, RegistryUnavailableError
from core.services.metadata import MetadataService
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_shared_secret
from core.utils.response import ResponseBuilder
from core.utils.time import utc_now_iso
from core.utils.validators import (
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .models import DeleteImagesRequest, DeleteImagesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_shared_secret
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `DELETE /api/images` with body `{"ids": [...]}`.

    This function:
    - Validates the id list (any unsafe id rejects the whole request)
    - Deletes each image's object, then its record
    - Answers 404 when none of the ids existed

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        request = validate_request(DeleteImagesRequest, parse_json_body(event))
    except ValidationError as exc:
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        deleted, not_found = MetadataService().delete_many(request.ids)

    except InvalidIdentifierError as exc:
        return ResponseBuilder.from_error(exc)

    except RegistryUnavailableError as exc:
        logger.exception("Deletion failed", extra={"count": len(request.ids)})
        return ResponseBuilder.from_error(exc)

    response = DeleteImagesResponse(
        deleted=deleted,
        not_found=not_found,
        deleted_at=utc_now_iso(),
    )

    if not deleted:
        return ResponseBuilder.error(
            status=HTTPStatus.NOT_FOUND,
            message="Image not found",
            details=response.model_dump(),
        )

    return ResponseBuilder.ok(response.model_dump())

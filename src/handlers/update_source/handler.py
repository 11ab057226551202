"""
Lambda handler updating the attribution of one image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import (
    InvalidIdentifierError,
    NotFoundError,
    RegistryUnavailableError,
)
from core.services.metadata import MetadataService
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_shared_secret
from core.utils.response import ResponseBuilder
from core.utils.validators import (
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .models import UpdateSourceRequest, UpdateSourceResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_shared_secret
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `PUT /api/sources` with body `{"id": "...", "source": "..."}`.

    Returns 404 when the id is not registered; no record is created.
    """
    logger.info(
        "Received source update request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        request = validate_request(UpdateSourceRequest, parse_json_body(event))
    except ValidationError as exc:
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        previous = MetadataService().set_source(request.id, request.source)

    except InvalidIdentifierError as exc:
        return ResponseBuilder.from_error(exc)

    except NotFoundError:
        logger.warning("Image not found during source update", extra={"id": request.id})
        return ResponseBuilder.not_found(f"Image not found: {request.id}")

    except RegistryUnavailableError as exc:
        logger.exception("Source update failed", extra={"id": request.id})
        return ResponseBuilder.from_error(exc)

    response = UpdateSourceResponse(
        id=request.id,
        source=request.source or None,
        previous_source=previous,
    )
    return ResponseBuilder.ok(response.model_dump())

"""
Lambda handler for batch attribution lookup.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import RegistryUnavailableError
from core.services.metadata import MetadataService
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_shared_secret
from core.utils.response import ResponseBuilder
from core.utils.validators import (
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .models import GetSourcesRequest, GetSourcesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_shared_secret
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `POST /api/sources` with body `{"ids": [...]}`.

    Missing ids are reported as null, not as an error.
    """
    logger.info(
        "Received source lookup request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        request = validate_request(GetSourcesRequest, parse_json_body(event))
    except ValidationError as exc:
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        sources = MetadataService().get_sources(request.ids)
    except RegistryUnavailableError as exc:
        logger.exception("Source lookup failed", extra={"count": len(request.ids)})
        return ResponseBuilder.from_error(exc)

    return ResponseBuilder.ok(GetSourcesResponse(sources=sources).model_dump())

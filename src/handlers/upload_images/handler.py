"""
Lambda handler responsible for image upload.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import (
    AllocationExhaustedError,
    ObjectStoreError,
    RegistryUnavailableError,
    ValidationError,
)
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler, require_shared_secret
from core.utils.response import ResponseBuilder
from core.utils.validators import (
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .models import UploadImagesRequest, UploadImagesResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@require_shared_secret
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected API Gateway event structure:
    {
        "headers": {"Authorization": "<secret>"},
        "body": "{\"images\": [{\"file\": \"<base64>\", \"filename\": \"cat.png\"}]}"
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        201 with the public file names, in request order
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    body = parse_json_body(event)

    try:
        request = validate_request(UploadImagesRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = UploadService()

    try:
        files = [
            (item.filename, UploadService.decode_file(item.file))
            for item in request.images
        ]
        records = service.upload_images(files)

    except ValidationError as exc:
        logger.warning("Rejected image upload", extra={"error": exc.error_code})
        return ResponseBuilder.from_error(exc)

    except (AllocationExhaustedError, RegistryUnavailableError) as exc:
        logger.exception("Identifier allocation failed")
        return ResponseBuilder.from_error(exc)

    except ObjectStoreError as exc:
        logger.exception("Infrastructure error during image upload")
        return ResponseBuilder.from_error(exc)

    response = UploadImagesResponse(
        files=[record.filename for record in records],
        message="Images uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump())

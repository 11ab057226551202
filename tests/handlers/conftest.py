import json
import os
from types import SimpleNamespace
from typing import Any

import pytest

from core.models.image import ImageRecord


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2026/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": os.environ["IMAGE_HOST_SECRET"],
    }


@pytest.fixture
def json_event(auth_headers):
    """Build an authenticated API Gateway event with a JSON body."""

    def _event(body: Any, *, method: str = "POST", headers: dict[str, str] | None = None) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "headers": auth_headers if headers is None else headers,
            "body": json.dumps(body),
        }

    return _event


@pytest.fixture
def path_event():
    """Build a public API Gateway event addressing `{filename}`."""

    def _event(filename: str | None) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "pathParameters": {"filename": filename} if filename is not None else None,
        }

    return _event


@pytest.fixture
def hosted_image(aws_resources, sample_image_binary):
    """Upload an image through the service layer against the mocked stack."""
    from handlers.upload_images.service import UploadService

    def _hosted(filename: str = "cat.png", data: bytes | None = None) -> ImageRecord:
        return UploadService().upload_image(
            filename=filename,
            file_data=sample_image_binary if data is None else data,
        )

    return _hosted

import base64
import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.models.errors import (
    AllocationExhaustedError,
    ImageServiceError,
    InvalidExtensionError,
    NotFoundError,
    ObjectStoreWriteFailedError,
    RegistryUnavailableError,
    UnauthorizedError,
)
from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_created_response() -> None:
    resp = ResponseBuilder.created({"id": 1})
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert parsed["id"] == 1


def test_no_content_response() -> None:
    resp = ResponseBuilder.no_content(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.not_found, HTTPStatus.NOT_FOUND, "NOT_FOUND"),
        (ResponseBuilder.service_unavailable, HTTPStatus.SERVICE_UNAVAILABLE, "SERVICE_UNAVAILABLE"),
        (
            ResponseBuilder.internal_error,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
        ),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("bad", request_id="req-x", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == error_name
    assert parsed["message"] == "bad"
    assert parsed["request_id"] == "req-x"
    assert "timestamp" in parsed


def test_default_error_messages() -> None:
    assert parse_body(ResponseBuilder.not_found())["message"] == "Resource not found"
    assert (
        parse_body(ResponseBuilder.internal_error())["message"]
        == "Internal server error"
    )


def test_validation_error() -> None:
    resp = ResponseBuilder.validation_error(
        message="Invalid input",
        details={"field": "name"},
        request_id="req-val",
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
    assert parsed["error"] == "VALIDATION_FAILED"
    assert parsed["message"] == "Invalid input"
    assert parsed["details"]["field"] == "name"
    assert parsed["request_id"] == "req-val"


def test_binary_response() -> None:
    content = b"binary-data"

    resp = ResponseBuilder.binary_response(
        content,
        content_type="image/png",
        cors_origin="*",
    )

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["isBase64Encoded"] is True
    assert base64.b64decode(resp["body"]) == content
    assert resp["headers"]["Content-Type"] == "image/png"


def test_redirect_response() -> None:
    resp = ResponseBuilder.redirect("https://example.com/cat")

    assert resp["statusCode"] == HTTPStatus.FOUND
    assert resp["headers"]["Location"] == "https://example.com/cat"
    assert resp["body"] == ""


@pytest.mark.parametrize(
    "exc,status",
    [
        (InvalidExtensionError(message="Invalid image extension '.svg'"), HTTPStatus.BAD_REQUEST),
        (UnauthorizedError(), HTTPStatus.UNAUTHORIZED),
        (NotFoundError(message="Image not found"), HTTPStatus.NOT_FOUND),
        (AllocationExhaustedError(message="exhausted"), HTTPStatus.SERVICE_UNAVAILABLE),
        (RegistryUnavailableError(message="down"), HTTPStatus.SERVICE_UNAVAILABLE),
        (ObjectStoreWriteFailedError(message="disk full"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (ImageServiceError(message="odd", error_code="ODD"), HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_from_error_maps_status_and_keeps_code(exc, status) -> None:
    resp = ResponseBuilder.from_error(exc, request_id="req-e")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == exc.error_code
    assert parsed["message"] == exc.message
    assert parsed["request_id"] == "req-e"


def test_from_error_includes_details() -> None:
    exc = NotFoundError(message="Image not found", details={"image_id": "abc123"})

    parsed = parse_body(ResponseBuilder.from_error(exc))

    assert parsed["details"] == {"image_id": "abc123"}

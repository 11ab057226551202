"""Pydantic models for image upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import MAX_BATCH_SIZE, MAX_FILE_SIZE, get_max_file_size_mb

logger = Logger(UTC=True)


class UploadImageItem(BaseModel):
    """One file of an upload batch."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    filename: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Original file name; only its extension is kept",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_FILE_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(
                f"File size exceeds {get_max_file_size_mb()}MB limit"
            )

        return value


class UploadImagesRequest(BaseModel):
    """Validation model for a batch upload."""

    images: list[UploadImageItem] = Field(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="Files to host",
    )


class UploadImagesResponse(BaseModel):
    """Response model for a successful upload."""

    files: list[str] = Field(..., description="Public file names, in request order")
    message: str = Field(..., description="Success message")

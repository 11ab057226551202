"""Pydantic models for delete images request/response."""

from pydantic import BaseModel, Field, StrictStr

from core.utils.constants import MAX_BATCH_SIZE


class DeleteImagesRequest(BaseModel):
    """Validation model for delete images request."""

    ids: list[StrictStr] = Field(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="Identifiers or public file names to delete",
    )


class DeleteImagesResponse(BaseModel):
    """Per-id outcome of a delete request."""

    deleted: list[str] = Field(..., description="Ids whose record was removed")
    not_found: list[str] = Field(..., description="Ids with no record")
    deleted_at: str = Field(..., description="Deletion timestamp")

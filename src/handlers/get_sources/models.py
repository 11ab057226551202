"""Pydantic models for batch source lookup."""

from pydantic import BaseModel, Field, StrictStr

from core.utils.constants import MAX_BATCH_SIZE


class GetSourcesRequest(BaseModel):
    """Validation model for a batch source lookup."""

    ids: list[StrictStr] = Field(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="Identifiers or public file names",
    )


class GetSourcesResponse(BaseModel):
    """One entry per requested id, null where there is no record."""

    sources: list[str | None] = Field(..., description="Attributions, in request order")

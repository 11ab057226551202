"""Pydantic models for attribution updates."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class UpdateSourceRequest(BaseModel):
    """Validation model for an attribution update."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: StrictStr = Field(..., min_length=1, description="Identifier or public file name")
    source: StrictStr | None = Field(
        None,
        max_length=2048,
        description="New attribution; null or empty clears it",
    )


class UpdateSourceResponse(BaseModel):
    """Response model for a successful update."""

    id: str
    source: str | None
    previous_source: str | None

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class GetSourceRequest(BaseModel):
    """Validation model for a source lookup."""

    model_config = ConfigDict(str_strip_whitespace=True)

    filename: StrictStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Identifier or public file name to resolve",
    )

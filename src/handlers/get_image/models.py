from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    filename: StrictStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Public file name to serve, e.g. abc123.png",
    )

    @field_validator("filename")
    @classmethod
    def validate_filename_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("filename must not be blank")
        return value

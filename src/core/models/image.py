"""Shared image record models."""

from enum import Enum

from pydantic import BaseModel, Field, StrictStr


class ImageRecord(BaseModel):
    """Registry entry for one hosted image."""

    image_id: StrictStr = Field(..., description="Public random identifier (registry key)")
    extension: StrictStr = Field(..., description="File extension recorded at claim time, e.g. .png")
    source: StrictStr | None = Field(None, description="Optional attribution, usually an origin URL")
    created_at: StrictStr | None = Field(None, description="ISO-8601 claim timestamp (UTC)")

    @property
    def filename(self) -> str:
        """Public file name, `<image_id><extension>`."""
        return f"{self.image_id}{self.extension}"


class ResolutionKind(str, Enum):
    REDIRECT = "redirect"
    SERVE_LOCAL = "serve_local"
    NOT_FOUND = "not_found"


class SourceResolution(BaseModel):
    """Outcome of a source lookup.

    Callers must branch on `kind`: a redirect carries `target`, a local
    serve carries the `record` whose object should be streamed, and a miss
    carries neither.
    """

    kind: ResolutionKind
    target: StrictStr | None = None
    record: ImageRecord | None = None

    @classmethod
    def redirect(cls, record: ImageRecord) -> "SourceResolution":
        return cls(kind=ResolutionKind.REDIRECT, target=record.source, record=record)

    @classmethod
    def serve_local(cls, record: ImageRecord) -> "SourceResolution":
        return cls(kind=ResolutionKind.SERVE_LOCAL, record=record)

    @classmethod
    def not_found(cls) -> "SourceResolution":
        return cls(kind=ResolutionKind.NOT_FOUND)

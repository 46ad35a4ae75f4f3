from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ThoughtImage(BaseModel):
    """An uploaded image as attached to a thought.

    Once returned by the uploader the record is never mutated; edits that keep
    an image carry the same instance forward.
    """

    model_config = ConfigDict(frozen=True)

    url: str  # Public OSS URL
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    blurhash: str | None = None

    @property
    def aspect_ratio(self) -> float:
        if self.height <= 0:
            return 1.0
        return self.width / self.height

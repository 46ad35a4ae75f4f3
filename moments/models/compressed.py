from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompressedImage(BaseModel):
    """Size-bounded JPEG derivative produced by the compressor."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: bytes = Field(repr=False)
    width: int
    height: int
    quality: float
    image: Any = Field(default=None, exclude=True, repr=False)  # working image, backend specific

    @property
    def is_empty(self) -> bool:
        return not self.data

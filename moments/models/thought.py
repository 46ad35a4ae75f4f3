from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .image_data import ThoughtImage
from .selection import SelectedImage


class Visibility(str, Enum):
    public = "public"
    private = "private"
    unlisted = "unlisted"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Thought(_CamelModel):
    """A journal entry as returned by the backend."""

    id: str
    content: str
    images: list[ThoughtImage] = []
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime
    visibility: Visibility | None = Visibility.public


class CreateThoughtRequest(_CamelModel):
    content: str
    images: list[ThoughtImage] = []
    tags: list[str] = []
    visibility: Visibility | None = Visibility.public


class UpdateThoughtRequest(_CamelModel):
    content: str | None = None
    images: list[ThoughtImage] | None = None
    tags: list[str] | None = None
    visibility: Visibility | None = None


class ThoughtDraft(BaseModel):
    """What the composer hands to the publisher."""

    content: str
    images: list[SelectedImage] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

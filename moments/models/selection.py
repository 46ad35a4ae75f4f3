from __future__ import annotations

from pydantic import BaseModel, Field

from .image_data import ThoughtImage


class SelectedImage(BaseModel):
    """One entry of the composer's image list.

    Images kept from an existing thought carry ``url`` (and their hash);
    newly picked ones carry the encoded file bytes in ``data``.
    """

    url: str | None = None
    data: bytes | None = Field(default=None, repr=False)
    width: int = Field(0, ge=0)
    height: int = Field(0, ge=0)
    blurhash: str | None = None

    @classmethod
    def from_uploaded(cls, image: ThoughtImage) -> "SelectedImage":
        return cls(url=image.url, width=image.width, height=image.height, blurhash=image.blurhash)

    @property
    def is_uploaded(self) -> bool:
        return self.url is not None

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

Pixel = tuple[int, int, int]


class ImageBackend(ABC):
    """Abstract decode/resize/encode surface used by the compressor and the
    blur hash encoder.

    Image handles are opaque to callers; only the backend that produced one
    may operate on it.
    """

    name: str = "abstract"

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Decode an encoded blob. Raises ``ImageDecodeError`` on bad input."""

    @abstractmethod
    def size(self, image: Any) -> tuple[float, float]:
        """Return ``(width, height)`` in pixels."""

    @abstractmethod
    def normalize(self, image: Any) -> Any:
        """Apply orientation metadata and convert to 8-bit RGB."""

    @abstractmethod
    def resize(self, image: Any, width: int, height: int) -> Any:
        """Resize to exactly ``width`` x ``height``."""

    @abstractmethod
    def encode(self, image: Any, quality: float) -> bytes:
        """Encode as JPEG at ``quality`` in (0, 1]."""

    @abstractmethod
    def read_pixels(self, image: Any) -> Sequence[Pixel]:
        """Return row-major 8-bit ``(r, g, b)`` tuples."""

    def resize_to_width(self, image: Any, max_width: float) -> Any:
        """Shrink so width == ``max_width``, preserving aspect ratio.

        Images not wider than ``max_width`` are returned unchanged.
        """

        width, height = self.size(image)
        if width <= max_width:
            return image
        ratio = max_width / width
        new_height = max(1, round(height * ratio))
        return self.resize(image, int(max_width), new_height)

from __future__ import annotations

import io
import logging
from typing import Sequence

from PIL import Image, ImageOps, UnidentifiedImageError

from moments.errors import ImageDecodeError

from .base import ImageBackend, Pixel

logger = logging.getLogger(__name__)


class PillowBackend(ImageBackend):
    name = "pillow"

    def decode(self, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise ImageDecodeError(f"Failed to open image: {exc}") from exc

        # Animated formats: keep the first frame only
        if getattr(img, "is_animated", False):
            img.seek(0)
            img = img.copy()
        if img.width <= 0 or img.height <= 0:
            raise ImageDecodeError("Image has zero area")
        return img

    def size(self, image: Image.Image) -> tuple[float, float]:
        return image.size

    def normalize(self, image: Image.Image) -> Image.Image:
        image = ImageOps.exif_transpose(image)
        if image.mode in ("RGBA", "LA", "P"):
            # Flatten transparency onto white before dropping alpha
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if image.mode != "RGB":
            return image.convert("RGB")
        return image

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def encode(self, image: Image.Image, quality: float) -> bytes:
        if image.mode != "RGB":
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=max(1, min(95, round(quality * 100))), optimize=True)
        return buffer.getvalue()

    def read_pixels(self, image: Image.Image) -> Sequence[Pixel]:
        if image.mode != "RGB":
            image = image.convert("RGB")
        raw = image.tobytes()
        return list(zip(raw[0::3], raw[1::3], raw[2::3]))

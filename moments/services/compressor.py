"""Bound an image to the upload byte budget and maximum width.

The search walks a fixed, finite list of ``(quality, max_width)`` tiers:

1. the image resized to ``max_width`` (if wider) at decreasing JPEG quality,
   from ``initial_quality`` down to ``min_quality`` in 0.1 steps;
2. then, at ``min_quality``, the *original* image resized to narrower widths
   in 200 px steps while the working width is still above 800 px.

The first tier whose payload fits the budget wins; when none fits, the last
one is returned.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterator

from moments.config import get_settings
from moments.models import CompressedImage

from .imaging import ImageBackend, get_backend

logger = logging.getLogger(__name__)
settings = get_settings()

QUALITY_STEP = 0.1
WIDTH_STEP = 200
WIDTH_FLOOR = 800
FALLBACK_DIMENSION = 100


def quality_steps(initial_quality: float, min_quality: float, step: float = QUALITY_STEP) -> Iterator[float]:
    """Yield ``initial_quality`` then lower qualities, never below ``min_quality``."""

    quality = initial_quality
    yield quality
    while quality > min_quality:
        # round() stops 0.7 - 0.1 * 4 from landing just above 0.3
        quality = max(min_quality, round(quality - step, 6))
        yield quality


def compression_tiers(
    max_width: float,
    initial_quality: float,
    min_quality: float,
) -> Iterator[tuple[float, float]]:
    """Yield the ordered ``(quality, max_width)`` candidates."""

    for quality in quality_steps(initial_quality, min_quality):
        yield quality, max_width

    width = max_width
    while width > WIDTH_FLOOR:
        width -= WIDTH_STEP
        yield min_quality, width


def compress(
    image: Any,
    *,
    backend: ImageBackend | None = None,
    max_width: float | None = None,
    max_bytes: int | None = None,
    initial_quality: float | None = None,
    min_quality: float | None = None,
) -> CompressedImage:
    """Compress ``image`` (a decoded, normalized backend image).

    Never raises. If the backend fails to encode, the returned payload is
    empty and callers must skip the image.
    """

    backend = backend or get_backend()
    max_width = max_width if max_width is not None else settings.image_max_width
    max_bytes = max_bytes if max_bytes is not None else settings.image_max_bytes
    initial_quality = initial_quality if initial_quality is not None else settings.image_initial_quality
    min_quality = min_quality if min_quality is not None else settings.image_min_quality

    original_width, original_height = backend.size(image)

    working = image
    working_width: float | None = None
    data = b""
    quality = initial_quality

    for quality, tier_width in compression_tiers(max_width, initial_quality, min_quality):
        try:
            if tier_width != working_width:
                working = backend.resize_to_width(image, tier_width)
                working_width = tier_width
            data = backend.encode(working, quality)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Image encode failed at quality %.2f, width %s: %s", quality, tier_width, exc)
            data = b""
            break
        if len(data) <= max_bytes:
            break

    width, height = backend.size(working)
    width = _valid_dimension(width, original_width)
    height = _valid_dimension(height, original_height)

    logger.info(
        "Compressed image: %dx%d, quality %.1f, %d KB",
        width,
        height,
        quality,
        len(data) // 1024,
    )
    return CompressedImage(data=data, width=width, height=height, quality=quality, image=working)


def _valid_dimension(value: float, fallback: float) -> int:
    """Return a finite positive pixel size, falling back to ``fallback`` then 100."""

    for candidate in (value, fallback):
        if isinstance(candidate, (int, float)) and math.isfinite(candidate) and candidate > 0:
            return max(1, int(round(candidate)))
    return FALLBACK_DIMENSION

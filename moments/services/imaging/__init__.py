from __future__ import annotations

from .base import ImageBackend, Pixel
from .pillow_backend import PillowBackend
from .registry import get_backend

__all__ = [
    "ImageBackend",
    "Pixel",
    "PillowBackend",
    "get_backend",
]

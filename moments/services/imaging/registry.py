from __future__ import annotations

from functools import lru_cache

from moments.config import get_settings

from .base import ImageBackend
from .pillow_backend import PillowBackend

_BACKENDS: dict[str, type[ImageBackend]] = {
    "pillow": PillowBackend,
}


@lru_cache()
def get_backend() -> ImageBackend:
    settings = get_settings()
    backend_key = settings.image_backend.lower()
    if backend_key not in _BACKENDS:
        raise ValueError(f"Unsupported image backend: {backend_key}")
    return _BACKENDS[backend_key]()

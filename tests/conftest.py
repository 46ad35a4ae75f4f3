"""Shared fixtures.

Settings are read at import time by the service modules, so the required
environment is seeded here before any test module imports them.
"""
from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from typing import Callable

import pytest

os.environ.setdefault("OSS_ACCESS_KEY_ID", "test-id")
os.environ.setdefault("OSS_ACCESS_KEY_SECRET", "test-secret")
os.environ.setdefault("OSS_BUCKET", "test-bucket")
os.environ.setdefault("OSS_ENDPOINT", "https://test-bucket.oss.example.com")
os.environ.setdefault("MOMENTS_API_BASE_URL", "https://api.example.com")

from PIL import Image  # noqa: E402

from moments.services.imaging import ImageBackend  # noqa: E402


@dataclass
class FakeImage:
    width: float
    height: float
    source: "FakeImage | None" = None


@dataclass
class SizedBackend(ImageBackend):
    """Backend whose "JPEG" size is a function of width, height and quality."""

    size_fn: Callable[[float, float, float], int] = lambda w, h, q: 100
    encode_calls: list = field(default_factory=list)
    resize_calls: list = field(default_factory=list)

    name = "sized"

    def decode(self, data):
        return FakeImage(*map(int, data.decode().split("x")))

    def size(self, image):
        return image.width, image.height

    def normalize(self, image):
        return image

    def resize(self, image, width, height):
        self.resize_calls.append((image.width, width, height))
        return FakeImage(width, height, source=image)

    def encode(self, image, quality):
        self.encode_calls.append((image.width, quality))
        return b"\xff" * self.size_fn(image.width, image.height, quality)

    def read_pixels(self, image):
        return [(128, 128, 128)] * int(image.width * image.height)


@pytest.fixture
def sized_backend():
    return SizedBackend


def png_bytes(width: int, height: int, color=(255, 0, 0)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_png():
    return png_bytes(200, 100)


@pytest.fixture
def make_png():
    return png_bytes


@pytest.fixture
def fake_image():
    return FakeImage

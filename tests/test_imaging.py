from __future__ import annotations

import io

import pytest
from PIL import Image

from moments.errors import ImageDecodeError
from moments.services.imaging import PillowBackend, get_backend


def test_registry_returns_pillow_backend():
    assert isinstance(get_backend(), PillowBackend)


def test_decode_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        PillowBackend().decode(b"\x00\x01\x02")


def test_normalize_flattens_alpha_onto_white():
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 4), (0, 0, 0, 0)).save(buffer, format="PNG")
    backend = PillowBackend()

    image = backend.normalize(backend.decode(buffer.getvalue()))

    assert image.mode == "RGB"
    assert set(backend.read_pixels(image)) == {(255, 255, 255)}


def test_resize_to_width_preserves_aspect_ratio(make_png):
    backend = PillowBackend()
    image = backend.decode(make_png(400, 300))

    assert backend.resize_to_width(image, 200).size == (200, 150)
    assert backend.resize_to_width(image, 800) is image


def test_read_pixels_is_row_major(make_png):
    backend = PillowBackend()
    image = backend.decode(make_png(3, 2, color=(10, 20, 30)))

    assert backend.read_pixels(image) == [(10, 20, 30)] * 6

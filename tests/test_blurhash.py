from __future__ import annotations

import pytest

from moments.services.imaging import PillowBackend
from moments.utils.blurhash import (
    BASE83_ALPHABET,
    blurhash_for_image,
    encode_base83,
    encode_blurhash,
    linear_to_srgb,
    srgb_to_linear,
)

RED = (255, 0, 0)


def solid(width, height, color):
    return [color] * (width * height)


def gradient(width, height):
    return [((x * 8) % 256, (y * 8) % 256, (x * y) % 256) for y in range(height) for x in range(width)]


@pytest.mark.parametrize(
    "value, length, expected",
    [
        (0, 1, "0"),
        (82, 1, "~"),
        (83, 2, "10"),
        (6858, 2, "~q"),
        (0xFF0000, 4, "TI:j"),
    ],
)
def test_encode_base83(value, length, expected):
    assert encode_base83(value, length) == expected


def test_srgb_linear_round_trip_on_every_channel_value():
    assert all(linear_to_srgb(srgb_to_linear(v)) == v for v in range(256))


def test_single_component_hash_of_solid_red():
    assert encode_blurhash(solid(4, 4, RED), 4, 4, 1, 1) == "00TI:j"


def test_reference_hash_of_solid_red_thumbnail():
    # Hand-computed: the odd horizontal/vertical cosines sum to 1 over 32
    # samples and the even ones cancel, giving AC values 1/16 and 1/512 in R.
    assert encode_blurhash(solid(32, 32, RED), 32, 32, 4, 3) == "L9TI:j|cfQ|c|co1fQo1fQfQfQfQ"


def test_hash_length_and_alphabet():
    result = encode_blurhash(gradient(32, 32), 32, 32, 4, 3)

    assert len(result) == 1 + 1 + 4 + 2 * 11
    assert set(result) <= set(BASE83_ALPHABET)


@pytest.mark.parametrize("components", [(1, 1), (4, 3), (9, 9), (2, 7)])
def test_hash_length_follows_component_grid(components):
    x, y = components
    result = encode_blurhash(gradient(16, 16), 16, 16, x, y)

    assert len(result) == 6 + 2 * (x * y - 1)
    assert result[0] == BASE83_ALPHABET[(x - 1) + (y - 1) * 9]


def test_hash_is_deterministic():
    pixels = gradient(32, 32)
    assert encode_blurhash(pixels, 32, 32) == encode_blurhash(list(pixels), 32, 32)


@pytest.mark.parametrize("components", [(0, 3), (4, 10), (10, 1)])
def test_invalid_component_counts_are_rejected(components):
    with pytest.raises(ValueError):
        encode_blurhash(gradient(8, 8), 8, 8, *components)


def test_short_pixel_buffer_is_rejected():
    with pytest.raises(ValueError):
        encode_blurhash(solid(4, 3, RED), 4, 4)


def test_blurhash_for_image_leaves_source_untouched(make_png):
    backend = PillowBackend()
    image = backend.normalize(backend.decode(make_png(200, 100)))

    result = blurhash_for_image(image, backend)

    assert len(result) == 28
    assert image.size == (200, 100)

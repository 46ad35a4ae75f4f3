"""BlurHash encoder.

Produces the compact placeholder strings described at https://blurha.sh: a
DCT of the image in linear light, quantised and written in base 83. Any
standard decoder must be able to read the output, so every constant below
is part of the format.

    hash = size flag (1) + max AC (1) + DC (4) + 2 per AC component
"""
from __future__ import annotations

import math
from typing import Any, Sequence

BASE83_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz#$%*+,-.:;=?@[]^_{|}~"

DEFAULT_COMPONENTS = (4, 3)
DEFAULT_SAMPLE_SIZE = 32

Factor = tuple[float, float, float]


def encode_base83(value: int, length: int) -> str:
    """Encode ``value`` as exactly ``length`` base-83 digits, most significant first."""

    digits = []
    for i in range(1, length + 1):
        digit = (value // 83 ** (length - i)) % 83
        digits.append(BASE83_ALPHABET[digit])
    return "".join(digits)


def srgb_to_linear(value: int) -> float:
    v = value / 255
    if v <= 0.04045:
        return v / 12.92
    return ((v + 0.055) / 1.055) ** 2.4


def linear_to_srgb(value: float) -> int:
    v = max(0.0, min(1.0, value))
    if v <= 0.0031308:
        return int(v * 12.92 * 255 + 0.5)
    return int((1.055 * v ** (1 / 2.4) - 0.055) * 255 + 0.5)


def sign_pow(value: float, exp: float) -> float:
    return math.copysign(abs(value) ** exp, value)


_LINEAR = [srgb_to_linear(v) for v in range(256)]


def encode_blurhash(
    pixels: Sequence[tuple[int, int, int]],
    width: int,
    height: int,
    components_x: int = DEFAULT_COMPONENTS[0],
    components_y: int = DEFAULT_COMPONENTS[1],
) -> str:
    """Encode row-major 8-bit RGB ``pixels`` of a ``width`` x ``height`` image."""

    if not 1 <= components_x <= 9 or not 1 <= components_y <= 9:
        raise ValueError("BlurHash components must be between 1 and 9")
    if width <= 0 or height <= 0 or len(pixels) < width * height:
        raise ValueError(f"Pixel buffer does not describe a {width}x{height} image")

    linear = [(_LINEAR[r], _LINEAR[g], _LINEAR[b]) for r, g, b in pixels[: width * height]]

    factors: list[Factor] = []
    for j in range(components_y):
        for i in range(components_x):
            factors.append(_multiply_basis_function(linear, width, height, i, j))

    dc, ac = factors[0], factors[1:]

    parts = [encode_base83((components_x - 1) + (components_y - 1) * 9, 1)]

    if ac:
        actual_maximum = max(max(abs(r), abs(g), abs(b)) for r, g, b in ac)
        quantised_maximum = int(max(0, min(82, math.floor(actual_maximum * 166 - 0.5))))
        maximum_value = (quantised_maximum + 1) / 166
        parts.append(encode_base83(quantised_maximum, 1))
    else:
        maximum_value = 1.0
        parts.append(encode_base83(0, 1))

    parts.append(encode_base83(_encode_dc(dc), 4))
    for factor in ac:
        parts.append(encode_base83(_encode_ac(factor, maximum_value), 2))

    return "".join(parts)


def blurhash_for_image(
    image: Any,
    backend,
    *,
    components: tuple[int, int] = DEFAULT_COMPONENTS,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> str:
    """Hash a ``sample_size`` square thumbnail of a backend image.

    The thumbnail is a throwaway copy; ``image`` itself is left untouched.
    """

    small = backend.resize(image, sample_size, sample_size)
    return encode_blurhash(backend.read_pixels(small), sample_size, sample_size, *components)


def _multiply_basis_function(
    linear: Sequence[Factor],
    width: int,
    height: int,
    i: int,
    j: int,
) -> Factor:
    r = g = b = 0.0
    scale = 1 if i == 0 and j == 0 else 2
    cos_x = [math.cos(math.pi * i * x / width) for x in range(width)]

    for y in range(height):
        cos_y = scale * math.cos(math.pi * j * y / height)
        row = y * width
        for x in range(width):
            basis = cos_y * cos_x[x]
            pr, pg, pb = linear[row + x]
            r += basis * pr
            g += basis * pg
            b += basis * pb

    count = width * height
    return r / count, g / count, b / count


def _encode_dc(value: Factor) -> int:
    r, g, b = (linear_to_srgb(c) for c in value)
    return (r << 16) + (g << 8) + b


def _encode_ac(value: Factor, maximum_value: float) -> int:
    quant_r, quant_g, quant_b = (
        int(max(0, min(18, math.floor(sign_pow(c / maximum_value, 0.5) * 9 + 9.5)))) for c in value
    )
    return quant_r * 19 * 19 + quant_g * 19 + quant_b

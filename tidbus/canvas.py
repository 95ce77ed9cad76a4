"""A small raster surface holding premultiplied ARGB pixels."""

from __future__ import annotations

import math

from tidbus.colors import SolidColor, _muldiv255


def _to_pixel(value: float) -> int:
    return math.floor(value + 0.5)


def _source_over(src: int, dst: int) -> int:
    alpha = src >> 24
    if alpha == 255:
        return src
    inverse = 255 - alpha
    result = 0
    for shift in (24, 16, 8, 0):
        s = (src >> shift) & 0xFF
        d = (dst >> shift) & 0xFF
        result |= min(255, s + _muldiv255(d, inverse)) << shift
    return result


class DrawTarget:
    """A width x height grid of premultiplied 0xAARRGGBB pixels, initially transparent."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("draw target dimensions must be positive")
        self.width = width
        self.height = height
        self._data = [0] * (width * height)

    def fill_rect(
        self, x: float, y: float, width: float, height: float, color: SolidColor
    ) -> None:
        """Composite ``color`` over the rectangle, clipped to the surface."""
        x0 = max(0, _to_pixel(x))
        x1 = min(self.width, _to_pixel(x + width))
        y0 = max(0, _to_pixel(y))
        y1 = min(self.height, _to_pixel(y + height))
        source = color.premultiplied_argb()
        for row in range(y0, y1):
            base = row * self.width
            for index in range(base + x0, base + x1):
                self._data[index] = _source_over(source, self._data[index])

    def pixels(self) -> list[int]:
        """A copy of the pixels in row-major order."""
        return list(self._data)


def get_rgba(target: DrawTarget) -> bytes:
    """Unpremultiply the surface into RGBA bytes."""
    output = bytearray()
    for pixel in target.pixels():
        a = (pixel >> 24) & 0xFF
        r = (pixel >> 16) & 0xFF
        g = (pixel >> 8) & 0xFF
        b = pixel & 0xFF
        if a > 0:
            r = r * 255 // a
            g = g * 255 // a
            b = b * 255 // a
        output += bytes((r & 0xFF, g & 0xFF, b & 0xFF, a))
    return bytes(output)
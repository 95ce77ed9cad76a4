"""Colours dimmed according to the position of the sun."""

from __future__ import annotations

import math
import string
from dataclasses import dataclass
from datetime import datetime, timezone

from tidbus.solar import sun_altitude

LATITUDE = 40.692778
LONGITUDE = -73.990278
NIGHT_DARKENING = 0.8


def _muldiv255(a: int, b: int) -> int:
    product = a * b + 128
    return (product + (product >> 8)) >> 8


@dataclass(frozen=True)
class SolidColor:
    """An unpremultiplied 8-bit colour with alpha."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def premultiplied_argb(self) -> int:
        """Pack the colour as a premultiplied 0xAARRGGBB value."""
        a = self.alpha
        r = _muldiv255(a, self.red)
        g = _muldiv255(a, self.green)
        b = _muldiv255(a, self.blue)
        return (a << 24) | (r << 16) | (g << 8) | b


def parse_hex(hex_color: str) -> tuple[float, float, float]:
    """Parse '#rgb' or '#rrggbb' (the '#' is optional) into 0..1 channels."""
    digits = hex_color.strip().removeprefix("#")
    if not digits or any(c not in string.hexdigits for c in digits):
        raise ValueError(f"invalid hex colour: {hex_color!r}")
    if len(digits) == 3:
        channels = [int(c, 16) * 17 for c in digits]
    elif len(digits) == 6:
        channels = [int(digits[i : i + 2], 16) for i in (0, 2, 4)]
    else:
        raise ValueError(f"invalid hex colour: {hex_color!r}")
    red, green, blue = (c / 255.0 for c in channels)
    return red, green, blue


def _to_linear(value: float) -> float:
    if value <= 0.04045:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def _from_linear(value: float) -> float:
    value = max(value, 0.0)
    if value <= 0.0031308:
        return value * 12.92
    return 1.055 * value ** (1.0 / 2.4) - 0.055


def darkening_for_altitude(altitude: float) -> float:
    """Darkening factor for a given sun altitude."""
    if altitude < 0.0:
        return NIGHT_DARKENING
    return (90.0 - altitude) / 180.0


def get_sun_darkening(when: datetime | None = None) -> float:
    """Darkening factor for the configured location at ``when`` (default: now)."""
    moment = when if when is not None else datetime.now(timezone.utc)
    return darkening_for_altitude(sun_altitude(moment, LATITUDE, LONGITUDE))


def color_to_source(red: float, green: float, blue: float) -> SolidColor:
    """Turn 0..1 channels into an opaque 8-bit colour, saturating out-of-range values."""

    def to_byte(value: float) -> int:
        if math.isnan(value):
            return 0
        return min(255, max(0, math.floor(value * 255.0)))

    return SolidColor(to_byte(red), to_byte(green), to_byte(blue))


def adjusted_color_with_tint(
    hex_color: str, tint: float, when: datetime | None = None
) -> SolidColor:
    """Parse a colour and darken it by the sun darkening plus ``tint``."""
    factor = get_sun_darkening(when) + tint
    darkened = [_to_linear(c) * (1.0 - factor) for c in parse_hex(hex_color)]
    red, green, blue = (_from_linear(c) for c in darkened)
    return color_to_source(red, green, blue)


def adjusted_color(hex_color: str, when: datetime | None = None) -> SolidColor:
    """Parse a colour and darken it by the sun darkening alone."""
    return adjusted_color_with_tint(hex_color, 0.0, when)
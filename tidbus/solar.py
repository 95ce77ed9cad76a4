"""Position of the sun in the sky for a given instant and place."""

from __future__ import annotations

import math
from datetime import datetime

_RAD = math.pi / 180.0
_DAY_SECONDS = 86400.0
_J1970 = 2440588.0
_J2000 = 2451545.0
_OBLIQUITY = _RAD * 23.4397
_PERIHELION = _RAD * 102.9372


def _days_since_j2000(when: datetime) -> float:
    if when.tzinfo is None or when.utcoffset() is None:
        raise ValueError("a timezone-aware datetime is required")
    return when.timestamp() / _DAY_SECONDS - 0.5 + _J1970 - _J2000


def _solar_mean_anomaly(days: float) -> float:
    return _RAD * (357.5291 + 0.98560028 * days)


def _ecliptic_longitude(anomaly: float) -> float:
    center = _RAD * (
        1.9148 * math.sin(anomaly)
        + 0.02 * math.sin(2 * anomaly)
        + 0.0003 * math.sin(3 * anomaly)
    )
    return anomaly + center + _PERIHELION + math.pi


def _declination(longitude: float) -> float:
    return math.asin(math.sin(_OBLIQUITY) * math.sin(longitude))


def _right_ascension(longitude: float) -> float:
    return math.atan2(math.sin(longitude) * math.cos(_OBLIQUITY), math.cos(longitude))


def _sidereal_time(days: float, west_longitude: float) -> float:
    return _RAD * (280.16 + 360.9856235 * days) - west_longitude


def sun_altitude(when: datetime, latitude: float, longitude: float) -> float:
    """Return the sun's altitude above the horizon, in radians."""
    days = _days_since_j2000(when)
    west_longitude = _RAD * -longitude
    phi = _RAD * latitude

    ecliptic = _ecliptic_longitude(_solar_mean_anomaly(days))
    dec = _declination(ecliptic)
    hour_angle = _sidereal_time(days, west_longitude) - _right_ascension(ecliptic)

    return math.asin(
        math.sin(phi) * math.sin(dec)
        + math.cos(phi) * math.cos(dec) * math.cos(hour_angle)
    )
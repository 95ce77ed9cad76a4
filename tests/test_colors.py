from datetime import datetime, timezone

import pytest

from tidbus.colors import (
    SolidColor,
    adjusted_color,
    adjusted_color_with_tint,
    color_to_source,
    darkening_for_altitude,
    get_sun_darkening,
    parse_hex,
)

NIGHT = datetime(2024, 1, 1, 5, 0, tzinfo=timezone.utc)
DAY = datetime(2024, 6, 21, 17, 0, tzinfo=timezone.utc)


def test_parse_hex_white_and_black():
    assert parse_hex("#fff") == (1.0, 1.0, 1.0)
    assert parse_hex("#000000") == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("short,long", [("#0ff", "#00ffff"), ("#eee", "#eeeeee"), ("555", "#555555")])
def test_short_and_long_forms_agree(short, long):
    assert parse_hex(short) == parse_hex(long)


@pytest.mark.parametrize("bad", ["", "#", "#ff", "#ggg", "#12345", "#1234567"])
def test_parse_hex_rejects_invalid(bad):
    with pytest.raises(ValueError):
        parse_hex(bad)


def test_color_to_source_extremes():
    assert color_to_source(1.0, 1.0, 1.0) == SolidColor(255, 255, 255)
    assert color_to_source(0.0, 0.0, 0.0) == SolidColor(0, 0, 0)


def test_color_to_source_saturates():
    assert color_to_source(-0.5, 2.0, float("nan")) == SolidColor(0, 255, 0)


def test_darkening_below_horizon_is_night_value():
    assert darkening_for_altitude(-0.1) == 0.8


def test_darkening_above_horizon_decreases_with_altitude():
    assert darkening_for_altitude(0.2) > darkening_for_altitude(1.0)


def test_sun_darkening_at_night():
    assert get_sun_darkening(NIGHT) == 0.8


def test_sun_darkening_during_day_is_below_night():
    assert get_sun_darkening(DAY) < 0.8


def test_adjusted_color_is_zero_tint():
    assert adjusted_color("#0ff", NIGHT) == adjusted_color_with_tint("#0ff", 0.0, NIGHT)


def test_adjusted_white_is_grey_and_dimmed():
    color = adjusted_color("#fff", NIGHT)
    assert color.red == color.green == color.blue
    assert 0 < color.red < 255
    assert color.alpha == 255


def test_large_tint_gives_black():
    assert adjusted_color_with_tint("#fff", 0.6, DAY) == SolidColor(0, 0, 0)


def test_more_tint_never_brighter():
    light = adjusted_color_with_tint("#eee", 0.0, DAY)
    dark = adjusted_color_with_tint("#eee", 0.2, DAY)
    assert dark.red <= light.red


def test_premultiplied_opaque_keeps_channels():
    assert SolidColor(0x12, 0x34, 0x56).premultiplied_argb() == 0xFF123456
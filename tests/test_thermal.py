import math
from datetime import datetime

import pytest

from app.services.weather.thermal import (
    HOTTEST_BAND,
    THERMAL_BANDS,
    build_snapshot,
    classify_thermal_band,
    compute_thermal_band,
    daypart,
    effective_temperature,
    heat_index,
    map_weather_code,
    uv_band,
    wind_chill,
)

ALL_BANDS = [band for _, band in THERMAL_BANDS] + [HOTTEST_BAND]


def test_minus_five_is_heavy_winter():
    band = classify_thermal_band(-5.0)
    assert (band.min_warmth, band.max_warmth) == (5, 5)
    assert band.description == "Heavy winter clothing required"
    # still air, so no correction applies
    assert compute_thermal_band(-5.0, 80.0, 0.0) == band


def test_eight_contiguous_bands():
    assert len(ALL_BANDS) == 8
    uppers = [upper for upper, _ in THERMAL_BANDS]
    assert uppers == sorted(uppers)


@pytest.mark.parametrize(
    "temp,expected_index",
    [(-0.001, 0), (0.0, 1), (4.999, 1), (5.0, 2), (10.0, 3), (15.0, 4), (20.0, 5), (25.0, 6), (29.999, 6), (30.0, 7)],
)
def test_boundaries_go_to_upper_band(temp, expected_index):
    assert classify_thermal_band(temp) is ALL_BANDS[expected_index]


def test_dense_sampling_is_total_and_monotonic():
    previous = None
    for i in range(-2000, 4001):
        band = classify_thermal_band(i / 100.0)
        assert band in ALL_BANDS
        assert 1 <= band.min_warmth <= band.max_warmth <= 5
        if previous is not None:
            # warmer air never asks for warmer clothes
            assert ALL_BANDS.index(band) >= ALL_BANDS.index(previous)
            assert ALL_BANDS.index(band) - ALL_BANDS.index(previous) <= 1
        previous = band


def test_nan_and_infinities_still_classify():
    assert classify_thermal_band(float("nan")) is HOTTEST_BAND
    assert classify_thermal_band(float("-inf")) is ALL_BANDS[0]
    assert classify_thermal_band(float("inf")) is HOTTEST_BAND


def test_heat_index_only_above_twenty():
    assert effective_temperature(20.0, 90.0, 0.0) == 20.0
    assert effective_temperature(32.0, 70.0, 0.0) == pytest.approx(heat_index(32.0, 70.0))
    assert heat_index(32.0, 70.0) > 32.0


def test_wind_chill_only_when_cold_and_windy():
    assert effective_temperature(5.0, 50.0, 20.0) == pytest.approx(wind_chill(5.0, 20.0))
    assert wind_chill(5.0, 20.0) < 5.0
    assert effective_temperature(5.0, 50.0, 5.0) == 5.0
    assert effective_temperature(10.0, 50.0, 30.0) == 10.0


def test_wind_chill_can_move_band():
    calm = compute_thermal_band(1.0, 50.0, 0.0)
    windy = compute_thermal_band(1.0, 50.0, 30.0)
    assert calm.min_warmth == 4
    assert windy is ALL_BANDS[0]


def test_uv_band():
    assert [uv_band(v) for v in (0, 2.9, 3, 6, 8, 11)] == ["low", "low", "moderate", "high", "very_high", "very_high"]


def test_daypart():
    sunrise = datetime(2026, 10, 19, 7, 10)
    sunset = datetime(2026, 10, 19, 18, 30)
    assert daypart(datetime(2026, 10, 19, 5), sunrise, sunset) == "night"
    assert daypart(datetime(2026, 10, 19, 9), sunrise, sunset) == "morning"
    assert daypart(datetime(2026, 10, 19, 14), sunrise, sunset) == "afternoon"
    assert daypart(datetime(2026, 10, 19, 19), sunrise, sunset) == "evening"
    assert daypart(datetime(2026, 10, 19, 23)) == "night"


def test_map_weather_code():
    assert map_weather_code(0) == "clear"
    assert map_weather_code(63) == "rain"
    assert map_weather_code(None) == "unknown"
    assert map_weather_code(1234) == "unknown"


def test_build_snapshot_derived_flags():
    snap = build_snapshot(
        temperature=12.0,
        feels_like=10.0,
        humidity=70.0,
        wind_speed=30.0,
        precipitation_probability=10.0,
        uv_index=4.0,
        condition="drizzle",
    )
    assert snap.is_rainy
    assert snap.is_windy
    assert snap.uv_band == "moderate"
    assert snap.thermal_band == compute_thermal_band(12.0, 70.0, 30.0)
    assert not snap.fallback

    dry = build_snapshot(
        temperature=12.0,
        feels_like=12.0,
        humidity=70.0,
        wind_speed=3.0,
        precipitation_probability=60.0,
        uv_index=1.0,
        condition="cloudy",
    )
    assert dry.is_rainy
    assert not dry.is_windy
    assert math.isclose(dry.thermal_band.midpoint, 2.5)


@pytest.mark.parametrize(
    "temperature,humidity,wind,expected",
    [
        (1e200, 50.0, 0.0, HOTTEST_BAND),
        (25.0, 1e200, 0.0, ALL_BANDS[6]),
        (-1e200, 50.0, 1e300, ALL_BANDS[0]),
        (5.0, 50.0, float("inf"), ALL_BANDS[2]),
    ],
)
def test_extreme_readings_still_classify(temperature, humidity, wind, expected):
    assert compute_thermal_band(temperature, humidity, wind) is expected

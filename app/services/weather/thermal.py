"""Weather → clothing warmth requirement.

Raw air temperature is corrected to an effective temperature (heat index
when hot, wind chill when cold and windy) and bucketed into eight bands.
Bucketing uses strict ``<`` in ascending order so every float, NaN
included, lands in exactly one band.
"""
import math
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Tuple

from .types import (
    RAIN_PROBABILITY_MIN,
    RAINY_CONDITIONS,
    WINDY_SPEED_MIN,
    Daypart,
    ThermalBand,
    UVBand,
    WeatherSnapshot,
)

HEAT_INDEX_MIN_TEMP = 20.0
WIND_CHILL_MAX_TEMP = 10.0
WIND_CHILL_MIN_WIND = 5.0  # km/h

# (upper bound exclusive, band); the final band has no upper bound
THERMAL_BANDS: Sequence[Tuple[float, ThermalBand]] = (
    (0.0, ThermalBand(2.5, 5, 5, "Heavy winter clothing required")),
    (5.0, ThermalBand(2.0, 4, 5, "Winter jacket, layers, gloves")),
    (10.0, ThermalBand(1.5, 3, 4, "Jacket or heavy sweater")),
    (15.0, ThermalBand(1.0, 2, 3, "Light jacket or long sleeves")),
    (20.0, ThermalBand(0.7, 2, 3, "Long sleeves or light layers")),
    (25.0, ThermalBand(0.5, 1, 2, "T-shirt and light pants")),
    (30.0, ThermalBand(0.35, 1, 1, "Light, breathable clothing")),
)
HOTTEST_BAND = ThermalBand(0.25, 1, 1, "Minimal, loose clothing")

WMO_CONDITIONS = {
    0: "clear",
    1: "mostly_clear",
    2: "partly_cloudy",
    3: "cloudy",
    45: "foggy",
    48: "foggy",
    51: "drizzle",
    53: "drizzle",
    55: "drizzle",
    61: "rain",
    63: "rain",
    65: "rain",
    71: "snow",
    73: "snow",
    75: "snow",
    77: "snow",
    80: "rain",
    81: "rain",
    82: "rain",
    85: "snow",
    86: "snow",
    95: "thunderstorm",
    96: "thunderstorm",
    99: "thunderstorm",
}


def heat_index(temp_c: float, humidity: float) -> float:
    """Simplified Rothfusz regression, Celsius coefficients."""
    T, RH = temp_c, humidity
    return (
        -8.78469475556
        + 1.61139411 * T
        + 2.33854883889 * RH
        - 0.14611605 * T * RH
        - 0.012308094 * T * T
        - 0.0164248277778 * RH * RH
        + 0.002211732 * T * T * RH
        + 0.00072546 * T * RH * RH
        - 0.000003582 * T * T * RH * RH
    )


def wind_chill(temp_c: float, wind_kmh: float) -> float:
    v16 = wind_kmh ** 0.16
    return 13.12 + 0.6215 * temp_c - 11.37 * v16 + 0.3965 * temp_c * v16


def effective_temperature(temperature: float, humidity: float, wind_speed: float) -> float:
    """Air temperature corrected for humidity or wind chill.

    Extreme readings can push the correction polynomials to inf or NaN; the
    raw temperature is used then.
    """
    if temperature > HEAT_INDEX_MIN_TEMP:
        adjusted = heat_index(temperature, humidity)
    elif temperature < WIND_CHILL_MAX_TEMP and wind_speed > WIND_CHILL_MIN_WIND:
        adjusted = wind_chill(temperature, wind_speed)
    else:
        return temperature
    return adjusted if math.isfinite(adjusted) else temperature


def classify_thermal_band(effective_temp: float) -> ThermalBand:
    for upper, band in THERMAL_BANDS:
        if effective_temp < upper:
            return band
    return HOTTEST_BAND


def compute_thermal_band(temperature: float, humidity: float, wind_speed: float) -> ThermalBand:
    return classify_thermal_band(effective_temperature(temperature, humidity, wind_speed))


def uv_band(uv_index: float) -> UVBand:
    if uv_index < 3:
        return "low"
    if uv_index < 6:
        return "moderate"
    if uv_index < 8:
        return "high"
    return "very_high"


def daypart(now: datetime, sunrise: Optional[datetime] = None, sunset: Optional[datetime] = None) -> Daypart:
    hour = now.hour
    sunrise_hour = sunrise.hour if sunrise else 6
    sunset_hour = sunset.hour if sunset else 18
    if hour < sunrise_hour or hour >= 22:
        return "night"
    if hour < 12:
        return "morning"
    if hour < sunset_hour:
        return "afternoon"
    return "evening"


def map_weather_code(code: Optional[int]) -> str:
    if code is None:
        return "unknown"
    return WMO_CONDITIONS.get(int(code), "unknown")


def build_snapshot(
    *,
    temperature: float,
    feels_like: float,
    humidity: float,
    wind_speed: float,
    precipitation_probability: float,
    uv_index: float,
    condition: str,
    daypart_value: Daypart = "afternoon",
    fallback: bool = False,
    fetched_at: Optional[datetime] = None,
) -> WeatherSnapshot:
    """Assemble a snapshot with every derived field filled in."""
    return WeatherSnapshot(
        temperature=temperature,
        feels_like=feels_like,
        humidity=humidity,
        wind_speed=wind_speed,
        precipitation_probability=precipitation_probability,
        uv_index=uv_index,
        condition=condition,
        thermal_band=compute_thermal_band(temperature, humidity, wind_speed),
        is_rainy=precipitation_probability > RAIN_PROBABILITY_MIN or condition in RAINY_CONDITIONS,
        is_windy=wind_speed > WINDY_SPEED_MIN,
        uv_band=uv_band(uv_index),
        daypart=daypart_value,
        fallback=fallback,
        fetched_at=fetched_at,
    )


def restore_snapshot(data: Mapping[str, Any], *, fallback: Optional[bool] = None) -> WeatherSnapshot:
    """Rebuild a cached snapshot from its raw readings.

    Stored band and flags are ignored; they are derived again from the
    readings so a stale classification can never come back from the cache.
    """
    fetched = data.get("fetched_at")
    return build_snapshot(
        temperature=float(data["temperature"]),
        feels_like=float(data.get("feels_like", data["temperature"])),
        humidity=float(data.get("humidity", 0.0)),
        wind_speed=float(data.get("wind_speed", 0.0)),
        precipitation_probability=float(data.get("precipitation_probability", 0.0)),
        uv_index=float(data.get("uv_index", 0.0)),
        condition=str(data.get("condition", "unknown")),
        daypart_value=data.get("daypart", "afternoon"),
        fallback=bool(data.get("fallback", False)) if fallback is None else fallback,
        fetched_at=datetime.fromisoformat(fetched) if fetched else None,
    )

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError
from redis.exceptions import RedisError

from app.core.cache import JsonCache, RedisJsonCache
from app.core.config import settings
from .thermal import build_snapshot, daypart, map_weather_code, restore_snapshot
from .types import WeatherSnapshot

logger = logging.getLogger(__name__)

HOURLY_FIELDS = "temperature_2m,relativehumidity_2m,apparent_temperature,precipitation_probability,windspeed_10m,uv_index"


class _Hourly(BaseModel):
    time: List[str]
    temperature_2m: List[Optional[float]]
    relativehumidity_2m: List[Optional[float]]
    apparent_temperature: List[Optional[float]]
    precipitation_probability: List[Optional[float]] = Field(default_factory=list)
    windspeed_10m: List[Optional[float]]
    uv_index: List[Optional[float]] = Field(default_factory=list)


class _Daily(BaseModel):
    weathercode: List[Optional[int]] = Field(default_factory=list)
    sunrise: List[str] = Field(default_factory=list)
    sunset: List[str] = Field(default_factory=list)


class _ForecastResponse(BaseModel):
    utc_offset_seconds: int = 0
    hourly: _Hourly
    daily: _Daily = Field(default_factory=_Daily)


def default_snapshot() -> WeatherSnapshot:
    """Mild weather that favors layers; used when nothing else is available."""
    return build_snapshot(
        temperature=18.0,
        feels_like=18.0,
        humidity=60.0,
        wind_speed=10.0,
        precipitation_probability=20.0,
        uv_index=3.0,
        condition="cloudy",
        daypart_value="afternoon",
        fallback=True,
    )


def _at(values: List[Optional[float]], idx: int, default: float = 0.0) -> float:
    if idx < len(values) and values[idx] is not None:
        return float(values[idx])
    return default


def _parse_local(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


class OpenMeteoClient:
    """Weather lookup backed by the Open-Meteo forecast API.

    Live results are cached for ``WEATHER_CACHE_TTL_S``; a second copy is kept
    for ``WEATHER_FALLBACK_TTL_S`` and served (flagged ``fallback``) when the
    provider is unreachable. With no copy at all a default mild snapshot is
    returned, also flagged.
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        cache: Optional[JsonCache] = None,
        *,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.http = http
        self.cache = cache if cache is not None else RedisJsonCache()
        self.base_url = base_url or settings.WEATHER_API_URL
        self.timeout_s = timeout_s or settings.WEATHER_TIMEOUT_S

    async def fetch(self, lat: float, lon: float, *, now: Optional[datetime] = None) -> WeatherSnapshot:
        key = f"{lat:.2f}:{lon:.2f}"
        cached = await self._cache_get(f"weather:{key}")
        if cached:
            logger.info("weather cache hit %s", key)
            return restore_snapshot(cached)

        try:
            snapshot = await self._fetch_live(lat, lon, now or datetime.now(timezone.utc))
        except (httpx.HTTPError, ValidationError, ValueError, LookupError) as exc:
            logger.error("weather fetch failed for %s: %s", key, exc)
            return await self._fallback(key)

        payload = snapshot.to_dict()
        await self._cache_set(f"weather:{key}", payload, settings.WEATHER_CACHE_TTL_S)
        await self._cache_set(f"weather:fallback:{key}", payload, settings.WEATHER_FALLBACK_TTL_S)
        logger.info("weather fetched for %s temp=%.1f", key, snapshot.temperature)
        return snapshot

    async def _fetch_live(self, lat: float, lon: float, now: datetime) -> WeatherSnapshot:
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": HOURLY_FIELDS,
            "daily": "weathercode,sunrise,sunset",
            "timezone": "auto",
            "forecast_days": 1,
        }
        if self.http is not None:
            resp = await self.http.get(self.base_url, params=params, timeout=self.timeout_s)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                resp = await client.get(self.base_url, params=params)
        resp.raise_for_status()
        data = _ForecastResponse.model_validate(resp.json())

        local_now = now.astimezone(timezone.utc) + timedelta(seconds=data.utc_offset_seconds)
        hour_key = local_now.strftime("%Y-%m-%dT%H:00")
        try:
            idx = data.hourly.time.index(hour_key)
        except ValueError:
            raise LookupError(f"hour {hour_key} missing from forecast") from None

        h = data.hourly
        temperature = _at(h.temperature_2m, idx)
        sunrise = _parse_local(data.daily.sunrise[0] if data.daily.sunrise else None)
        sunset = _parse_local(data.daily.sunset[0] if data.daily.sunset else None)
        return build_snapshot(
            temperature=temperature,
            feels_like=_at(h.apparent_temperature, idx, temperature),
            humidity=_at(h.relativehumidity_2m, idx),
            wind_speed=_at(h.windspeed_10m, idx),
            precipitation_probability=_at(h.precipitation_probability, idx),
            uv_index=_at(h.uv_index, idx),
            condition=map_weather_code(data.daily.weathercode[0] if data.daily.weathercode else None),
            daypart_value=daypart(local_now, sunrise, sunset),
            fetched_at=now,
        )

    async def _fallback(self, key: str) -> WeatherSnapshot:
        stored = await self._cache_get(f"weather:fallback:{key}")
        if stored:
            logger.info("using fallback weather for %s", key)
            return restore_snapshot(stored, fallback=True)
        logger.warning("using default fallback weather for %s", key)
        return default_snapshot()

    async def _cache_get(self, key: str):
        try:
            return await self.cache.get(key)
        except RedisError as exc:
            logger.warning("weather cache read failed for %s: %s", key, exc)
            return None

    async def _cache_set(self, key: str, payload: dict, ttl: int) -> None:
        try:
            await self.cache.set(key, payload, ttl)
        except RedisError as exc:
            logger.warning("weather cache write failed for %s: %s", key, exc)

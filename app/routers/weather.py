from functools import lru_cache

from fastapi import APIRouter, Depends, Query

from app.auth.deps import get_current_user_id
from app.schemas.outfits import ThermalBandOut
from app.schemas.weather import CurrentWeatherOut, DerivedWeatherOut, LocationOut, WeatherOut
from app.services.weather import OpenMeteoClient, WeatherSnapshot

router = APIRouter(prefix="/weather", tags=["weather"])


@lru_cache(maxsize=1)
def get_weather_client() -> OpenMeteoClient:
    return OpenMeteoClient()


def thermal_band_out(snapshot: WeatherSnapshot) -> ThermalBandOut:
    band = snapshot.thermal_band
    return ThermalBandOut(
        clo_target=band.clo_target,
        min_warmth=band.min_warmth,
        max_warmth=band.max_warmth,
        description=band.description,
    )


@router.get("", response_model=WeatherOut)
async def get_weather(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    client: OpenMeteoClient = Depends(get_weather_client),
    _user_id: str = Depends(get_current_user_id),
):
    w = await client.fetch(lat, lon)
    return WeatherOut(
        location=LocationOut(lat=lat, lon=lon),
        current=CurrentWeatherOut(
            temperature=w.temperature,
            feels_like=w.feels_like,
            humidity=w.humidity,
            wind_speed=w.wind_speed,
            condition=w.condition,
            uv_index=w.uv_index,
        ),
        derived=DerivedWeatherOut(
            thermal_band=thermal_band_out(w),
            is_rainy=w.is_rainy,
            is_windy=w.is_windy,
            uv_band=w.uv_band,
            daypart=w.daypart,
        ),
        fallback=w.fallback,
    )

from pydantic import BaseModel

from app.schemas.outfits import ThermalBandOut


class LocationOut(BaseModel):
    lat: float
    lon: float


class CurrentWeatherOut(BaseModel):
    temperature: float
    feels_like: float
    humidity: float
    wind_speed: float
    condition: str
    uv_index: float


class DerivedWeatherOut(BaseModel):
    thermal_band: ThermalBandOut
    is_rainy: bool
    is_windy: bool
    uv_band: str
    daypart: str


class WeatherOut(BaseModel):
    location: LocationOut
    current: CurrentWeatherOut
    derived: DerivedWeatherOut
    fallback: bool = False

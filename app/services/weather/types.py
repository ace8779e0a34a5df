from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Literal, Optional

UVBand = Literal["low", "moderate", "high", "very_high"]
Daypart = Literal["morning", "afternoon", "evening", "night"]

RAINY_CONDITIONS = {"rain", "drizzle", "snow"}
RAIN_PROBABILITY_MIN = 50.0
WINDY_SPEED_MIN = 25.0  # km/h


@dataclass(frozen=True)
class ThermalBand:
    clo_target: float  # clothing insulation
    min_warmth: int  # 1-5
    max_warmth: int
    description: str

    @property
    def midpoint(self) -> float:
        return (self.min_warmth + self.max_warmth) / 2


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: float  # °C
    feels_like: float
    humidity: float  # %
    wind_speed: float  # km/h
    precipitation_probability: float  # %
    uv_index: float
    condition: str
    thermal_band: ThermalBand
    is_rainy: bool
    is_windy: bool
    uv_band: UVBand
    daypart: Daypart
    fallback: bool = False
    fetched_at: Optional[datetime] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["fetched_at"] = self.fetched_at.isoformat() if self.fetched_at else None
        return data

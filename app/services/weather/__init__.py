from .types import ThermalBand, WeatherSnapshot
from .thermal import build_snapshot, classify_thermal_band, compute_thermal_band, effective_temperature
from .client import OpenMeteoClient, default_snapshot

__all__ = [
    "ThermalBand",
    "WeatherSnapshot",
    "build_snapshot",
    "classify_thermal_band",
    "compute_thermal_band",
    "effective_temperature",
    "OpenMeteoClient",
    "default_snapshot",
]

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class OutfitSuggestIn(BaseModel):
    date: Optional[str] = None
    override_recency: Optional[bool] = False
    count: Optional[int] = Field(default=None, ge=1, le=20)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coords_together(self):
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must be given together")
        return self


class GarmentOut(BaseModel):
    id: str
    name: Optional[str] = None
    category: str
    image_url: Optional[str] = None


class ScoreBreakdownOut(BaseModel):
    color_harmony: float
    formality_match: float
    thermal_fit: float
    pattern_mix: float
    user_prefs: float
    recency_decay: float
    set_diversity: float
    total: float


class ThermalBandOut(BaseModel):
    clo_target: float
    min_warmth: int
    max_warmth: int
    description: str


class SuggestedOutfit(BaseModel):
    id: str
    score: float
    score_breakdown: ScoreBreakdownOut
    color_harmony_type: str
    top: Optional[GarmentOut] = None
    bottom: Optional[GarmentOut] = None
    dress: Optional[GarmentOut] = None
    footwear: GarmentOut
    outerwear: Optional[GarmentOut] = None


class SuggestWeatherOut(BaseModel):
    temperature: float
    feels_like: float
    condition: str
    is_rainy: bool
    thermal_band: ThermalBandOut
    fallback: bool = False


class OutfitSuggestOut(BaseModel):
    weather: SuggestWeatherOut
    outfits: List[SuggestedOutfit]

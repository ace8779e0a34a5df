import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

from app.services.color.types import HarmonyType, LabColor
from app.services.weather.types import ThermalBand, WeatherSnapshot

Category = Literal["top", "bottom", "dress", "footwear", "outerwear", "accessory"]
CATEGORIES: Tuple[str, ...] = ("top", "bottom", "dress", "footwear", "outerwear", "accessory")
SLOTS: Tuple[str, ...] = ("top", "bottom", "dress", "footwear", "outerwear")


@dataclass(frozen=True)
class Garment:
    id: str
    category: Category
    name: Optional[str] = None
    warmth_score: Optional[int] = None  # 1-5
    formality_score: Optional[int] = None  # 1-5
    water_resistant: bool = False
    wind_resistant: bool = False
    uv_resistant: bool = False
    has_pattern: bool = False
    pattern_type: Optional[str] = None
    pattern_intensity: Optional[str] = None  # subtle | moderate | bold
    is_available: bool = True
    last_worn: Optional[datetime] = None
    wear_count: int = 0
    image_url: Optional[str] = None
    colors: Tuple[LabColor, ...] = ()


@dataclass(frozen=True)
class OutfitCandidate:
    """One structurally legal, unscored outfit."""

    footwear: Garment
    top: Optional[Garment] = None
    bottom: Optional[Garment] = None
    dress: Optional[Garment] = None
    outerwear: Optional[Garment] = None
    accessories: Tuple[Garment, ...] = ()

    def __post_init__(self) -> None:
        separates = self.top is not None and self.bottom is not None
        partial = (self.top is None) != (self.bottom is None)
        if partial or separates == (self.dress is not None):
            raise ValueError("outfit needs either top+bottom or a dress, not both")

    def slot_garments(self) -> List[Garment]:
        return [g for g in (self.top, self.bottom, self.dress, self.footwear, self.outerwear) if g is not None]

    def garments(self) -> List[Garment]:
        return self.slot_garments() + list(self.accessories)


@dataclass(frozen=True)
class ScoringWeights:
    color: float = 0.30
    style: float = 0.15
    weather: float = 0.20
    pattern: float = 0.10
    prefs: float = 0.10
    recency: float = 0.10
    diversity: float = 0.05

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ScoringWeights":
        """Overlay user weights on the defaults and rescale to sum to 1.

        Raises ValueError on unknown keys, negative or non-finite values, or
        an all-zero result.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown weights: {sorted(unknown)}")
        defaults = cls()
        merged = {f.name: getattr(defaults, f.name) for f in fields(cls)}
        for key, raw in data.items():
            val = float(raw)
            if not math.isfinite(val) or val < 0:
                raise ValueError(f"weight {key} must be a finite non-negative number")
            merged[key] = val
        total = sum(merged.values())
        if total <= 0:
            raise ValueError("weights must not all be zero")
        return cls(**{k: v / total for k, v in merged.items()})


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoreBreakdown:
    color_harmony: float
    formality_match: float
    thermal_fit: float
    pattern_mix: float
    user_prefs: float
    recency_decay: float
    set_diversity: float
    total: float

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ScoredOutfit:
    candidate: OutfitCandidate
    score: float
    breakdown: ScoreBreakdown
    color_harmony_type: HarmonyType
    # filled in during diversification only
    embedding: Optional[np.ndarray] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ScoringContext:
    date: date
    thermal_band: ThermalBand
    weights: ScoringWeights = DEFAULT_WEIGHTS


@dataclass(frozen=True)
class UserPreferences:
    recency_days: int = 7
    weights: ScoringWeights = DEFAULT_WEIGHTS
    location: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class EligibilityFilter:
    user_id: str
    date: date
    recency_days: int
    override_recency: bool
    thermal_band: ThermalBand
    is_rainy: bool


@dataclass
class SuggestionResult:
    outfits: List[ScoredOutfit]
    weather: WeatherSnapshot


class InventoryLookup(Protocol):
    async def eligible_garments(self, flt: EligibilityFilter) -> List[Garment]:
        ...


class WeatherLookup(Protocol):
    async def fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        ...


class EmbeddingLookup(Protocol):
    async def get_embeddings(self, garment_ids: Sequence[str]) -> Dict[str, Optional[List[float]]]:
        ...


class SettingsLookup(Protocol):
    async def get(self, user_id: str) -> UserPreferences:
        ...

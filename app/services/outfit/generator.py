from itertools import islice
from typing import Dict, Iterable, Iterator, List, Sequence

from .types import Garment, OutfitCandidate
from app.services.weather.types import ThermalBand

DEFAULT_MAX_CANDIDATES = 1000
OUTERWEAR_MIN_WARMTH = 3


def group_by_category(garments: Iterable[Garment]) -> Dict[str, List[Garment]]:
    groups: Dict[str, List[Garment]] = {}
    for g in garments:
        groups.setdefault(g.category, []).append(g)
    return groups


def needs_outerwear(thermal_band: ThermalBand, is_rainy: bool) -> bool:
    return thermal_band.min_warmth >= OUTERWEAR_MIN_WARMTH or is_rainy


def iter_candidates(
    garments: Sequence[Garment],
    thermal_band: ThermalBand,
    is_rainy: bool,
) -> Iterator[OutfitCandidate]:
    """Yield outfits lazily: separates first (tops outermost), then dresses.

    Each bare combination is emitted before its outerwear variants.
    """
    groups = group_by_category(garments)
    footwear = groups.get("footwear", [])
    outerwear = groups.get("outerwear", []) if needs_outerwear(thermal_band, is_rainy) else []

    for top in groups.get("top", []):
        for bottom in groups.get("bottom", []):
            for foot in footwear:
                yield OutfitCandidate(top=top, bottom=bottom, footwear=foot)
                for outer in outerwear:
                    yield OutfitCandidate(top=top, bottom=bottom, footwear=foot, outerwear=outer)

    for dress in groups.get("dress", []):
        for foot in footwear:
            yield OutfitCandidate(dress=dress, footwear=foot)
            for outer in outerwear:
                yield OutfitCandidate(dress=dress, footwear=foot, outerwear=outer)


def generate_candidates(
    garments: Sequence[Garment],
    thermal_band: ThermalBand,
    is_rainy: bool,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> List[OutfitCandidate]:
    """Enumerate legal outfits, stopping as soon as ``max_candidates`` is reached."""
    if max_candidates <= 0:
        return []
    return list(islice(iter_candidates(garments, thermal_band, is_rainy), max_candidates))

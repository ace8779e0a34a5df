from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .delta_e import delta_e_2000
from .types import DEFAULT_HARMONY_THRESHOLDS, NEUTRAL_CHROMA_MAX, HarmonyThresholds, HarmonyType, LabColor

MONOCHROME_HUE_MAX = 15.0
MONOCHROME_LIGHTNESS_MIN = 20.0


@dataclass(frozen=True)
class HarmonyResult:
    score: float
    harmony_type: HarmonyType


def compute_color_harmony(
    colors: Sequence[LabColor],
    thresholds: HarmonyThresholds = DEFAULT_HARMONY_THRESHOLDS,
) -> HarmonyResult:
    """Score how well a pooled set of outfit colors goes together (0-1).

    Every unordered pair is classified; a single pair further apart than
    ``max_delta_e`` rejects the whole set.
    """
    if not colors:
        return HarmonyResult(score=0.0, harmony_type="neutral")
    if len(colors) == 1:
        return HarmonyResult(score=1.0, harmony_type="monochromatic")

    total = 0.0
    pair_types: List[HarmonyType] = []
    for i in range(len(colors)):
        for j in range(i + 1, len(colors)):
            c1, c2 = colors[i], colors[j]
            if delta_e_2000(c1, c2) > thresholds.max_delta_e:
                return HarmonyResult(score=0.0, harmony_type="mixed")
            kind, value = _classify_pair(c1, c2, thresholds)
            total += value
            pair_types.append(kind)

    score = min(1.0, total / len(pair_types))
    dominant = Counter(pair_types).most_common(1)[0][0]
    return HarmonyResult(score=score, harmony_type=dominant)


def _classify_pair(c1: LabColor, c2: LabColor, t: HarmonyThresholds) -> Tuple[HarmonyType, float]:
    if c1.is_neutral or c2.is_neutral:
        return "neutral", t.neutral_boost
    hue_diff = hue_distance(c1.hue, c2.hue)
    if hue_diff < MONOCHROME_HUE_MAX and abs(c1.L - c2.L) > MONOCHROME_LIGHTNESS_MIN:
        return "monochromatic", 1.0
    if hue_diff <= t.analogous_max:
        return "analogous", 1.0
    if t.complementary_min <= hue_diff <= t.complementary_max:
        return "complementary", 0.9
    if abs(hue_diff - t.triadic_target) <= t.triadic_tolerance:
        return "triadic", 0.85
    return "mixed", 0.3


def hue_distance(h1: float, h2: float) -> float:
    diff = abs(h1 - h2) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def is_neutral_color(color: LabColor, chroma_threshold: float = NEUTRAL_CHROMA_MAX) -> bool:
    return color.chroma < chroma_threshold


def complementary_hue(hue: float) -> float:
    return (hue + 180.0) % 360.0


def analogous_hues(hue: float, spread: float = 30.0) -> Tuple[float, float]:
    return ((hue - spread) % 360.0, (hue + spread) % 360.0)


def triadic_hues(hue: float) -> Tuple[float, float]:
    return ((hue + 120.0) % 360.0, (hue + 240.0) % 360.0)

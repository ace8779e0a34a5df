from .types import DEFAULT_HARMONY_THRESHOLDS, HarmonyThresholds, HarmonyType, LabColor, coerce_lab
from .delta_e import ClosestColor, are_colors_similar, compute_delta_e, delta_e_2000, find_closest_color
from .harmony import HarmonyResult, compute_color_harmony

__all__ = [
    "DEFAULT_HARMONY_THRESHOLDS",
    "HarmonyThresholds",
    "HarmonyType",
    "LabColor",
    "coerce_lab",
    "ClosestColor",
    "are_colors_similar",
    "compute_delta_e",
    "delta_e_2000",
    "find_closest_color",
    "HarmonyResult",
    "compute_color_harmony",
]

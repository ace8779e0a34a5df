"""CIEDE2000 color difference.

Rough reading of the result:
    < 1    not perceptible
    1-2    perceptible on close inspection
    2-10   perceptible at a glance
    11-49  more similar than opposite
    50+    very different
"""
import math
from dataclasses import dataclass
from typing import Any, Sequence

from app.core.errors import EmptyPaletteError
from .types import LabColor, coerce_lab

_POW25_7 = 25.0 ** 7


@dataclass(frozen=True)
class ClosestColor:
    color: LabColor
    distance: float
    index: int


def delta_e_2000(c1: LabColor, c2: LabColor) -> float:
    L1, a1, b1 = c1.L, c1.a, c1.b
    L2, a2, b2 = c2.L, c2.a, c2.b

    C1 = math.hypot(a1, b1)
    C2 = math.hypot(a2, b2)
    C_bar7 = ((C1 + C2) / 2.0) ** 7
    G = 0.5 * (1.0 - math.sqrt(C_bar7 / (C_bar7 + _POW25_7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = math.hypot(a1p, b1)
    C2p = math.hypot(a2p, b2)
    h1p = _hue_deg(b1, a1p)
    h2p = _hue_deg(b2, a2p)

    dLp = L2 - L1
    dCp = C2p - C1p
    CpProd = C1p * C2p
    if CpProd == 0:
        dhp = 0.0
    else:
        dhp = h2p - h1p
        if dhp > 180.0:
            dhp -= 360.0
        elif dhp < -180.0:
            dhp += 360.0
    dHp = 2.0 * math.sqrt(CpProd) * math.sin(math.radians(dhp / 2.0))

    Lp_bar = (L1 + L2) / 2.0
    Cp_bar = (C1p + C2p) / 2.0
    if CpProd == 0:
        hp_bar = h1p + h2p
    elif abs(h1p - h2p) <= 180.0:
        hp_bar = (h1p + h2p) / 2.0
    elif h1p + h2p < 360.0:
        hp_bar = (h1p + h2p + 360.0) / 2.0
    else:
        hp_bar = (h1p + h2p - 360.0) / 2.0

    T = (
        1.0
        - 0.17 * math.cos(math.radians(hp_bar - 30.0))
        + 0.24 * math.cos(math.radians(2.0 * hp_bar))
        + 0.32 * math.cos(math.radians(3.0 * hp_bar + 6.0))
        - 0.20 * math.cos(math.radians(4.0 * hp_bar - 63.0))
    )
    d_theta = 30.0 * math.exp(-(((hp_bar - 275.0) / 25.0) ** 2))
    Cp_bar7 = Cp_bar ** 7
    R_C = 2.0 * math.sqrt(Cp_bar7 / (Cp_bar7 + _POW25_7))
    S_L = 1.0 + (0.015 * (Lp_bar - 50.0) ** 2) / math.sqrt(20.0 + (Lp_bar - 50.0) ** 2)
    S_C = 1.0 + 0.045 * Cp_bar
    S_H = 1.0 + 0.015 * Cp_bar * T
    R_T = -math.sin(math.radians(2.0 * d_theta)) * R_C

    tL = dLp / S_L
    tC = dCp / S_C
    tH = dHp / S_H
    return math.sqrt(max(0.0, tL * tL + tC * tC + tH * tH + R_T * tC * tH))


def _hue_deg(b: float, a_prime: float) -> float:
    if a_prime == 0 and b == 0:
        return 0.0
    h = math.degrees(math.atan2(b, a_prime))
    return h + 360.0 if h < 0 else h


def compute_delta_e(c1: Any, c2: Any) -> float:
    """ΔE2000 between two loosely-shaped colors. Never raises."""
    try:
        return delta_e_2000(coerce_lab(c1), coerce_lab(c2))
    except OverflowError:
        # components far outside L*a*b* range
        return math.inf


def are_colors_similar(c1: LabColor, c2: LabColor, threshold: float = 10.0) -> bool:
    return delta_e_2000(c1, c2) < threshold


def find_closest_color(target: LabColor, palette: Sequence[LabColor]) -> ClosestColor:
    if not palette:
        raise EmptyPaletteError("cannot find closest color in an empty palette")
    best_idx = 0
    best_dist = math.inf
    for idx, color in enumerate(palette):
        dist = delta_e_2000(target, color)
        if dist < best_dist:
            best_idx, best_dist = idx, dist
    return ClosestColor(color=palette[best_idx], distance=best_dist, index=best_idx)

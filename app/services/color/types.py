import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping

HarmonyType = Literal["complementary", "analogous", "triadic", "monochromatic", "neutral", "mixed"]

NEUTRAL_CHROMA_MAX = 15.0
ACCENT_CHROMA_MIN = 40.0
ACCENT_RATIO_MIN = 0.15


@dataclass(frozen=True)
class LabColor:
    """A single palette entry in CIE L*a*b* space.

    ``ratio`` is the share of the garment covered by this color; ratios across
    one garment's palette sum to 1. The neutral/accent flags come from palette
    extraction and are carried as-is.
    """

    L: float
    a: float
    b: float
    ratio: float = 1.0
    is_neutral: bool = False
    is_accent: bool = False

    @property
    def chroma(self) -> float:
        return math.hypot(self.a, self.b)

    @property
    def hue(self) -> float:
        h = math.degrees(math.atan2(self.b, self.a))
        return h + 360.0 if h < 0 else h

    @classmethod
    def from_lab(cls, L: float, a: float, b: float, ratio: float = 1.0) -> "LabColor":
        chroma = math.hypot(a, b)
        return cls(
            L=L,
            a=a,
            b=b,
            ratio=ratio,
            is_neutral=chroma < NEUTRAL_CHROMA_MAX,
            is_accent=chroma > ACCENT_CHROMA_MIN and ratio > ACCENT_RATIO_MIN,
        )


@dataclass(frozen=True)
class HarmonyThresholds:
    complementary_min: float = 120.0
    complementary_max: float = 240.0
    analogous_max: float = 30.0
    triadic_target: float = 120.0
    triadic_tolerance: float = 15.0
    neutral_boost: float = 1.2
    max_delta_e: float = 50.0


DEFAULT_HARMONY_THRESHOLDS = HarmonyThresholds()


def _num(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    return out if math.isfinite(out) else 0.0


def _pick(data: Mapping[str, Any], *keys: str) -> float:
    for key in keys:
        val = data.get(key)
        if val is not None:
            return _num(val)
    return 0.0


def coerce_lab(value: Any) -> LabColor:
    """Normalize any color-ish input into a LabColor.

    Accepts a LabColor, a mapping keyed ``lab_L/lab_a/lab_b`` or ``L/a/b``
    (the ``lab_`` names win), an ORM row exposing those attributes, or an
    ``(L, a, b)`` sequence. Missing or unreadable components become 0.
    """
    if isinstance(value, LabColor):
        return value
    if isinstance(value, Mapping):
        data = value
    elif isinstance(value, (tuple, list)):
        parts = [_num(v) for v in list(value)[:3]] + [0.0] * (3 - min(len(value), 3))
        return LabColor(L=parts[0], a=parts[1], b=parts[2])
    elif value is None:
        return LabColor(L=0.0, a=0.0, b=0.0)
    else:
        data = {k: getattr(value, k, None) for k in ("lab_L", "lab_l", "lab_a", "lab_b", "L", "a", "b", "ratio", "is_neutral", "is_accent")}
    return LabColor(
        L=_pick(data, "lab_L", "lab_l", "L"),
        a=_pick(data, "lab_a", "a"),
        b=_pick(data, "lab_b", "b"),
        ratio=_pick(data, "ratio") if data.get("ratio") is not None else 1.0,
        is_neutral=bool(data.get("is_neutral") or data.get("isNeutral") or False),
        is_accent=bool(data.get("is_accent") or data.get("isAccent") or False),
    )

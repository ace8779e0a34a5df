from datetime import date
from statistics import fmean, pvariance
from typing import List, Optional, Sequence

from app.services.color.harmony import compute_color_harmony
from .types import Garment, OutfitCandidate, ScoreBreakdown, ScoredOutfit, ScoringContext

# Stand-in until a learned preference signal exists.
USER_PREFS_PLACEHOLDER = 0.5
# Real diversity is enforced by the diversifier, not per candidate.
SET_DIVERSITY_PLACEHOLDER = 1.0

DEFAULT_ATTRIBUTE_SCORE = 3
FORMALITY_VARIANCE_SCALE = 4.0
THERMAL_DISTANCE_SCALE = 5.0
RECENCY_HORIZON_DAYS = 14.0
BOLD = "bold"


def color_harmony_factor(garments: Sequence[Garment]):
    colors = [c for g in garments for c in g.colors]
    return compute_color_harmony(colors)


def formality_factor(garments: Sequence[Garment]) -> float:
    levels = [g.formality_score or DEFAULT_ATTRIBUTE_SCORE for g in garments]
    if len(levels) < 2:
        return 1.0
    return max(0.0, 1.0 - pvariance(levels) / FORMALITY_VARIANCE_SCALE)


def thermal_factor(garments: Sequence[Garment], ctx: ScoringContext) -> float:
    if not garments:
        return 0.0
    avg_warmth = fmean([g.warmth_score or DEFAULT_ATTRIBUTE_SCORE for g in garments])
    return 1.0 - min(1.0, abs(avg_warmth - ctx.thermal_band.midpoint) / THERMAL_DISTANCE_SCALE)


def pattern_factor(garments: Sequence[Garment]) -> float:
    bold = sum(1 for g in garments if g.has_pattern and g.pattern_intensity == BOLD)
    if bold <= 1:
        return 1.0
    if bold == 2:
        return 0.5
    return 0.0


def days_since_worn(garment: Garment, on: date) -> Optional[int]:
    if garment.last_worn is None:
        return None
    return max(0, (on - garment.last_worn.date()).days)


def recency_factor(garments: Sequence[Garment], on: date) -> float:
    """Mean days since last wear over worn garments, saturating at two weeks.

    Never-worn garments drop out of the mean; if nothing was ever worn the
    mean is taken as the full horizon.
    """
    worn: List[int] = [d for d in (days_since_worn(g, on) for g in garments) if d is not None]
    avg_days = fmean(worn) if worn else RECENCY_HORIZON_DAYS
    return min(1.0, avg_days / RECENCY_HORIZON_DAYS)


def score_outfit(
    candidate: OutfitCandidate,
    ctx: ScoringContext,
    scored: Sequence[ScoredOutfit] = (),
) -> ScoredOutfit:
    """Score one candidate on seven weighted factors.

    ``scored`` holds outfits already scored in this request; nothing reads it
    yet but it is kept in the signature for cross-candidate signals.
    """
    garments = candidate.garments()
    w = ctx.weights

    harmony = color_harmony_factor(garments)
    formality = formality_factor(garments)
    thermal = thermal_factor(garments, ctx)
    pattern = pattern_factor(garments)
    prefs = USER_PREFS_PLACEHOLDER
    recency = recency_factor(garments, ctx.date)
    diversity = SET_DIVERSITY_PLACEHOLDER

    total = (
        w.color * harmony.score
        + w.style * formality
        + w.weather * thermal
        + w.pattern * pattern
        + w.prefs * prefs
        + w.recency * recency
        + w.diversity * diversity
    )
    breakdown = ScoreBreakdown(
        color_harmony=harmony.score,
        formality_match=formality,
        thermal_fit=thermal,
        pattern_mix=pattern,
        user_prefs=prefs,
        recency_decay=recency,
        set_diversity=diversity,
        total=total,
    )
    return ScoredOutfit(
        candidate=candidate,
        score=total,
        breakdown=breakdown,
        color_harmony_type=harmony.harmony_type,
    )

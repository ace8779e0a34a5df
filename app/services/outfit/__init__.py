from .types import (
    DEFAULT_WEIGHTS,
    EligibilityFilter,
    Garment,
    OutfitCandidate,
    ScoreBreakdown,
    ScoredOutfit,
    ScoringContext,
    ScoringWeights,
    SuggestionResult,
    UserPreferences,
)
from .generator import generate_candidates
from .scoring import score_outfit
from .diversity import compute_outfit_embedding, diversify
from .engine import OutfitEngine

__all__ = [
    "DEFAULT_WEIGHTS",
    "EligibilityFilter",
    "Garment",
    "OutfitCandidate",
    "ScoreBreakdown",
    "ScoredOutfit",
    "ScoringContext",
    "ScoringWeights",
    "SuggestionResult",
    "UserPreferences",
    "generate_candidates",
    "score_outfit",
    "compute_outfit_embedding",
    "diversify",
    "OutfitEngine",
]

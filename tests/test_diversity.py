import numpy as np
import pytest

from app.services.outfit import Garment, OutfitCandidate, ScoreBreakdown, ScoredOutfit, compute_outfit_embedding, diversify
from app.services.outfit.diversity import cosine_similarity

DIM = 4


def _scored(tag: str, score: float) -> ScoredOutfit:
    candidate = OutfitCandidate(
        top=Garment(id=f"{tag}-top", category="top"),
        bottom=Garment(id=f"{tag}-bottom", category="bottom"),
        footwear=Garment(id=f"{tag}-shoe", category="footwear"),
    )
    breakdown = ScoreBreakdown(score, 1.0, 1.0, 1.0, 0.5, 1.0, 1.0, score)
    return ScoredOutfit(candidate=candidate, score=score, breakdown=breakdown, color_harmony_type="neutral")


def _vectors(tag: str, vec):
    return {f"{tag}-{slot}": list(vec) for slot in ("top", "bottom", "shoe")}


def _one_hot(i: int):
    v = [0.0] * DIM
    v[i] = 1.0
    return v


def test_empty_inputs():
    assert diversify([], 5, {}, dim=DIM) == []
    assert diversify([_scored("a", 0.5)], 0, {}, dim=DIM) == []


def test_best_outfit_always_first():
    outfits = [_scored("low", 0.2), _scored("high", 0.9), _scored("mid", 0.5)]
    out = diversify(outfits, 1, {}, dim=DIM)
    assert [o.candidate.top.id for o in out] == ["high-top"]


def test_floor_of_three_with_identical_embeddings():
    outfits = [_scored(str(i), 1.0 - i / 10) for i in range(5)]
    vectors = {}
    for i in range(5):
        vectors.update(_vectors(str(i), _one_hot(0)))
    out = diversify(outfits, 10, vectors, dim=DIM)
    assert [o.score for o in out] == [1.0, 0.9, 0.8]
    # fewer than three available
    assert len(diversify(outfits[:2], 10, vectors, dim=DIM)) == 2


def test_floor_holds_even_with_zero_threshold():
    outfits = [_scored(str(i), 1.0 - i / 10) for i in range(4)]
    out = diversify(outfits, 10, {}, similarity_threshold=0.0, dim=DIM)
    assert len(out) == 3


def test_near_duplicates_suppressed_after_floor():
    outfits = [
        _scored("a", 0.9),
        _scored("b", 0.8),
        _scored("c", 0.7),
        _scored("d", 0.6),
        _scored("e", 0.5),
    ]
    vectors = {}
    for tag in "abcd":
        vectors.update(_vectors(tag, _one_hot(0)))
    vectors.update(_vectors("e", _one_hot(1)))
    out = diversify(outfits, 10, vectors, dim=DIM)
    assert [o.candidate.top.id for o in out] == ["a-top", "b-top", "c-top", "e-top"]


def test_stops_at_top_n_and_keeps_score_order():
    outfits = [_scored(str(i), s) for i, s in enumerate([0.3, 0.8, 0.5, 0.9])]
    vectors = {}
    for i in range(4):
        vectors.update(_vectors(str(i), _one_hot(i)))
    out = diversify(outfits, 3, vectors, dim=DIM)
    assert [o.score for o in out] == [0.9, 0.8, 0.5]


def test_missing_vectors_count_as_zero():
    outfit = _scored("x", 0.5)
    vectors = {"x-top": [2.0, 0.0, 0.0, 0.0], "x-bottom": [1.0, 2.0], "x-shoe": None}
    emb = compute_outfit_embedding(outfit, vectors, dim=DIM)
    assert emb == pytest.approx(np.array([1.0, 0.0, 0.0, 0.0]))
    assert np.linalg.norm(emb) == pytest.approx(1.0)


def test_all_missing_gives_zero_vector():
    emb = compute_outfit_embedding(_scored("x", 0.5), {}, dim=DIM)
    assert not emb.any()
    assert cosine_similarity(emb, np.ones(DIM)) == 0.0


def test_embedding_is_attached():
    out = diversify([_scored("a", 0.5)], 3, _vectors("a", _one_hot(2)), dim=DIM)
    assert out[0].embedding == pytest.approx(np.array(_one_hot(2)))

from typing import List, Mapping, Optional, Sequence

import numpy as np

from .types import ScoredOutfit

DEFAULT_EMBEDDING_DIM = 512
SIMILARITY_THRESHOLD = 0.85
MIN_RESULTS = 3


def compute_outfit_embedding(
    outfit: ScoredOutfit,
    embeddings: Mapping[str, Optional[Sequence[float]]],
    dim: int = DEFAULT_EMBEDDING_DIM,
) -> np.ndarray:
    """Mean-pool the slot garments' vectors and L2-normalize.

    A garment without a stored vector counts as a zero vector. An empty pool
    or a zero norm yields the zero vector.
    """
    vectors = []
    for g in outfit.candidate.slot_garments():
        vec = embeddings.get(g.id)
        if vec is None or len(vec) != dim:
            vectors.append(np.zeros(dim, dtype=np.float64))
        else:
            vectors.append(np.asarray(vec, dtype=np.float64))
    if not vectors:
        return np.zeros(dim, dtype=np.float64)
    pooled = np.mean(vectors, axis=0)
    norm = float(np.linalg.norm(pooled))
    if norm == 0 or not np.isfinite(norm):
        return np.zeros(dim, dtype=np.float64)
    return pooled / norm


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    na = float(np.linalg.norm(a))
    nb = float(np.linalg.norm(b))
    if na == 0 or nb == 0:
        return 0.0
    return float(np.dot(a, b) / (na * nb))


def diversify(
    scored: Sequence[ScoredOutfit],
    top_n: int,
    embeddings: Mapping[str, Optional[Sequence[float]]],
    *,
    similarity_threshold: float = SIMILARITY_THRESHOLD,
    min_results: int = MIN_RESULTS,
    dim: int = DEFAULT_EMBEDDING_DIM,
) -> List[ScoredOutfit]:
    """Greedy near-duplicate suppression over the score-ordered list.

    The best outfit is always kept. Until ``min_results`` outfits are chosen
    every candidate is accepted; after that a candidate is kept when its
    lowest cosine similarity to the selected set is below
    ``similarity_threshold``.
    """
    if not scored or top_n <= 0:
        return []

    ranked = sorted(scored, key=lambda o: o.score, reverse=True)
    for outfit in ranked:
        outfit.embedding = compute_outfit_embedding(outfit, embeddings, dim)

    selected: List[ScoredOutfit] = [ranked[0]]
    for candidate in ranked[1:]:
        if len(selected) >= top_n:
            break
        min_sim = min(cosine_similarity(candidate.embedding, s.embedding) for s in selected)
        if min_sim < similarity_threshold or len(selected) < min_results:
            selected.append(candidate)
    return selected

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import date
from functools import lru_cache
from typing import Awaitable, List, Optional, Tuple, TypeVar

from app.core.config import settings
from app.core.errors import CollaboratorError, EngineError, NoLocationError, SuggestTimeoutError
from .diversity import diversify
from .generator import generate_candidates
from .scoring import score_outfit
from .types import (
    EligibilityFilter,
    EmbeddingLookup,
    InventoryLookup,
    OutfitCandidate,
    ScoredOutfit,
    ScoringContext,
    SettingsLookup,
    SuggestionResult,
    WeatherLookup,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=1)
def scoring_pool() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=settings.OUTFIT_SCORING_WORKERS, thread_name_prefix="outfit-score")


async def _lookup(collaborator: str, awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except EngineError:
        raise
    except Exception as exc:
        raise CollaboratorError(collaborator, f"{collaborator} lookup failed: {exc}") from exc


class OutfitEngine:
    """Candidate generation → scoring → diversification for one user/day."""

    def __init__(
        self,
        inventory: InventoryLookup,
        weather: WeatherLookup,
        embeddings: EmbeddingLookup,
        user_settings: SettingsLookup,
        *,
        executor: Optional[Executor] = None,
        max_candidates: Optional[int] = None,
        scoring_batch: Optional[int] = None,
    ) -> None:
        self.inventory = inventory
        self.weather = weather
        self.embeddings = embeddings
        self.user_settings = user_settings
        self.executor = executor
        self.max_candidates = max_candidates or settings.OUTFIT_MAX_CANDIDATES
        self.scoring_batch = max(1, scoring_batch or settings.OUTFIT_SCORING_BATCH)

    async def suggest_outfits(
        self,
        user_id: str,
        on: date,
        coords: Optional[Tuple[float, float]] = None,
        override_recency: bool = False,
        count: Optional[int] = None,
        deadline: Optional[float] = None,
    ) -> SuggestionResult:
        """Return the diversified top outfits and the weather they were picked for.

        ``deadline`` is a ``time.monotonic()`` value; it is only checked between
        stages and scoring batches.
        """
        count = count or settings.OUTFIT_DEFAULT_COUNT
        log_ctx = f"user={user_id} date={on.isoformat()}"
        logger.info("generating outfits %s", log_ctx)

        prefs = await _lookup("settings", self.user_settings.get(user_id))
        location = coords or prefs.location
        if location is None:
            raise NoLocationError(f"no location for user {user_id}")
        weather = await _lookup("weather", self.weather.fetch(*location))
        if weather.fallback:
            logger.warning("using fallback weather %s", log_ctx)

        flt = EligibilityFilter(
            user_id=user_id,
            date=on,
            recency_days=prefs.recency_days,
            override_recency=override_recency,
            thermal_band=weather.thermal_band,
            is_rainy=weather.is_rainy,
        )
        garments = await _lookup("inventory", self.inventory.eligible_garments(flt))
        candidates = generate_candidates(garments, weather.thermal_band, weather.is_rainy, self.max_candidates)
        logger.info("generated %d candidates from %d garments %s", len(candidates), len(garments), log_ctx)
        if not candidates:
            logger.warning("no candidates match constraints %s", log_ctx)
            return SuggestionResult(outfits=[], weather=weather)

        ctx = ScoringContext(date=on, thermal_band=weather.thermal_band, weights=prefs.weights)
        scored = await self._score_all(candidates, ctx, deadline)
        logger.info("scored %d outfits %s", len(scored), log_ctx)

        _check_deadline(deadline, "diversification")
        garment_ids = _unique_garment_ids(scored)
        vectors = await _lookup("embedding", self.embeddings.get_embeddings(garment_ids))
        missing = [gid for gid in garment_ids if vectors.get(gid) is None]
        if missing:
            logger.warning(
                "missing embeddings for %d of %d garments, diversification degraded %s",
                len(missing), len(garment_ids), log_ctx,
            )

        outfits = diversify(
            scored,
            count,
            vectors,
            similarity_threshold=settings.DIVERSITY_SIMILARITY_THRESHOLD,
            min_results=settings.DIVERSITY_MIN_RESULTS,
            dim=settings.EMBEDDING_DIM,
        )
        logger.info("returning %d outfits %s", len(outfits), log_ctx)
        return SuggestionResult(outfits=outfits, weather=weather)

    async def _score_all(
        self, candidates: List[OutfitCandidate], ctx: ScoringContext, deadline: Optional[float]
    ) -> List[ScoredOutfit]:
        loop = asyncio.get_running_loop()
        pool = self.executor or scoring_pool()
        scored: List[ScoredOutfit] = []
        for start in range(0, len(candidates), self.scoring_batch):
            _check_deadline(deadline, "scoring")
            batch = candidates[start : start + self.scoring_batch]
            previous = tuple(scored)
            results = await asyncio.gather(
                *(loop.run_in_executor(pool, score_outfit, c, ctx, previous) for c in batch),
                return_exceptions=True,
            )
            for candidate, result in zip(batch, results):
                if isinstance(result, Exception):
                    logger.error("failed to score candidate %s: %s", _describe(candidate), result)
                    continue
                if isinstance(result, BaseException):
                    raise result
                scored.append(result)
        return scored


def _check_deadline(deadline: Optional[float], stage: str) -> None:
    if deadline is not None and time.monotonic() >= deadline:
        raise SuggestTimeoutError(f"deadline passed before {stage}")


def _unique_garment_ids(scored: List[ScoredOutfit]) -> List[str]:
    seen = {}
    for outfit in scored:
        for g in outfit.candidate.slot_garments():
            seen.setdefault(g.id, None)
    return list(seen)


def _describe(candidate: OutfitCandidate) -> str:
    return "+".join(g.id for g in candidate.slot_garments())

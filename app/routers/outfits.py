import hashlib
import logging
import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import get_current_user_id
from app.core.config import settings
from app.core.db import get_session
from app.core.errors import CollaboratorError, NoLocationError, SuggestTimeoutError
from app.routers.weather import get_weather_client, thermal_band_out
from app.schemas.outfits import (
    GarmentOut,
    OutfitSuggestIn,
    OutfitSuggestOut,
    ScoreBreakdownOut,
    SuggestedOutfit,
    SuggestWeatherOut,
)
from app.services.embeddings import SqlEmbeddingLookup
from app.services.inventory import SqlInventory
from app.services.outfit import OutfitEngine, ScoredOutfit
from app.services.outfit.types import Garment
from app.services.user_settings import SqlSettingsLookup
from app.services.weather import OpenMeteoClient

router = APIRouter(prefix="/outfits", tags=["outfits"])
logger = logging.getLogger("uvicorn.error")


def get_outfit_engine(
    session: AsyncSession = Depends(get_session),
    weather: OpenMeteoClient = Depends(get_weather_client),
) -> OutfitEngine:
    return OutfitEngine(
        inventory=SqlInventory(session),
        weather=weather,
        embeddings=SqlEmbeddingLookup(session),
        user_settings=SqlSettingsLookup(session),
    )


def _parse_date(raw: Optional[str]) -> date:
    if not raw:
        return datetime.now(timezone.utc).date()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid_date") from e


def _garment_out(g: Optional[Garment]) -> Optional[GarmentOut]:
    if g is None:
        return None
    return GarmentOut(id=g.id, name=g.name, category=g.category, image_url=g.image_url)


def _outfit_id(outfit: ScoredOutfit) -> str:
    key = "+".join(g.id for g in outfit.candidate.slot_garments())
    return "temp-" + hashlib.sha1(key.encode()).hexdigest()[:12]


def _outfit_out(outfit: ScoredOutfit) -> SuggestedOutfit:
    c = outfit.candidate
    return SuggestedOutfit(
        id=_outfit_id(outfit),
        score=outfit.score,
        score_breakdown=ScoreBreakdownOut(**outfit.breakdown.as_dict()),
        color_harmony_type=outfit.color_harmony_type,
        top=_garment_out(c.top),
        bottom=_garment_out(c.bottom),
        dress=_garment_out(c.dress),
        footwear=_garment_out(c.footwear),
        outerwear=_garment_out(c.outerwear),
    )


@router.post("/suggest", response_model=OutfitSuggestOut)
async def suggest_outfits(
    body: OutfitSuggestIn,
    engine: OutfitEngine = Depends(get_outfit_engine),
    user_id: str = Depends(get_current_user_id),
):
    on = _parse_date(body.date)
    coords = (body.lat, body.lon) if body.lat is not None and body.lon is not None else None
    deadline = time.monotonic() + settings.SUGGEST_TIMEOUT_MS / 1000.0
    try:
        result = await engine.suggest_outfits(
            user_id,
            on,
            coords=coords,
            override_recency=bool(body.override_recency),
            count=body.count or settings.OUTFIT_DEFAULT_COUNT,
            deadline=deadline,
        )
    except NoLocationError as e:
        raise HTTPException(status_code=400, detail="no_location") from e
    except CollaboratorError as e:
        logger.error("outfit suggestion failed: %s", e.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "collaborator_failure", "collaborator": e.collaborator},
        ) from e
    except SuggestTimeoutError as e:
        logger.warning("outfit suggestion timed out for %s: %s", user_id, e)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="suggest_timeout") from e

    w = result.weather
    return OutfitSuggestOut(
        weather=SuggestWeatherOut(
            temperature=w.temperature,
            feels_like=w.feels_like,
            condition=w.condition,
            is_rainy=w.is_rainy,
            thermal_band=thermal_band_out(w),
            fallback=w.fallback,
        ),
        outfits=[_outfit_out(o) for o in result.outfits],
    )

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import get_current_user_id
from app.core.db import get_session
from app.models.models import Garment, WearHistory
from app.routers.weather import get_weather_client
from app.schemas.wear import WearHistoryEntry, WearHistoryOut, WearRecordIn, WearRecordOut
from app.services.user_settings import SqlSettingsLookup
from app.services.weather import OpenMeteoClient

router = APIRouter(prefix="/wear", tags=["wear"])
logger = logging.getLogger("uvicorn.error")


def _worn_at(raw: str | None) -> datetime:
    if not raw:
        return datetime.now(timezone.utc)
    try:
        return datetime.combine(date.fromisoformat(raw), time.min, tzinfo=timezone.utc)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid_date") from e


def next_available_dates(garment_ids, worn_at: datetime, recency_days: int) -> dict[str, str]:
    available = (worn_at.date() + timedelta(days=recency_days)).isoformat()
    return {str(g): available for g in garment_ids}


@router.post("", response_model=WearRecordOut)
async def record_wear(
    body: WearRecordIn,
    session: AsyncSession = Depends(get_session),
    weather_client: OpenMeteoClient = Depends(get_weather_client),
    user_id: str = Depends(get_current_user_id),
):
    try:
        garment_ids = list(dict.fromkeys(uuid.UUID(g) for g in body.garment_ids))
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid_garment_id") from e
    worn_at = _worn_at(body.date)

    res = await session.execute(
        select(Garment.id).where(Garment.user_id == user_id, Garment.id.in_(garment_ids))
    )
    found = {row[0] for row in res.all()}
    if len(found) != len(garment_ids):
        raise HTTPException(status_code=404, detail="garment_not_found")

    prefs = await SqlSettingsLookup(session).get(user_id)
    weather = await weather_client.fetch(*prefs.location) if prefs.location else None

    entry = WearHistory(
        id=uuid.uuid4(),
        user_id=user_id,
        garment_ids=garment_ids,
        date_worn=worn_at.date(),
        weather_temp=weather.temperature if weather else None,
        weather_condition=weather.condition if weather else None,
        weather_json=weather.to_dict() if weather else None,
    )
    session.add(entry)
    await session.execute(
        update(Garment)
        .where(Garment.user_id == user_id, Garment.id.in_(garment_ids))
        .values(last_worn=worn_at, wear_count=Garment.wear_count + 1)
    )
    await session.commit()
    logger.info("wear recorded %s for %d garments", entry.id, len(garment_ids))

    return WearRecordOut(
        wear_history_id=str(entry.id),
        garments_updated=[str(g) for g in garment_ids],
        next_available_dates=next_available_dates(garment_ids, worn_at, prefs.recency_days),
    )


@router.get("/history", response_model=WearHistoryOut)
async def wear_history(
    limit: int = Query(50, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    res = await session.execute(
        select(WearHistory)
        .where(WearHistory.user_id == user_id)
        .order_by(WearHistory.date_worn.desc())
        .limit(limit)
    )
    return WearHistoryOut(
        history=[
            WearHistoryEntry(
                id=str(h.id),
                garment_ids=[str(g) for g in h.garment_ids or []],
                date_worn=str(h.date_worn),
                weather_temp=h.weather_temp,
                weather_condition=h.weather_condition,
                created_at=str(h.created_at) if h.created_at else None,
            )
            for h in res.scalars().all()
        ]
    )

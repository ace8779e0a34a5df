from datetime import datetime, time, timedelta, timezone
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.models import Garment as GarmentModel, GarmentColor
from app.services.color.types import LabColor
from app.services.outfit.types import EligibilityFilter, Garment


def color_from_row(row: GarmentColor) -> LabColor:
    return LabColor(
        L=row.lab_l,
        a=row.lab_a,
        b=row.lab_b,
        ratio=row.ratio,
        is_neutral=bool(row.is_neutral),
        is_accent=bool(row.is_accent),
    )


def garment_from_row(row: GarmentModel) -> Garment:
    return Garment(
        id=str(row.id),
        category=row.category,
        name=row.name,
        warmth_score=row.warmth_score,
        formality_score=row.formality_score,
        water_resistant=bool(row.water_resistant),
        wind_resistant=bool(row.wind_resistant),
        uv_resistant=bool(row.uv_resistant),
        has_pattern=bool(row.has_pattern),
        pattern_type=row.pattern_type,
        pattern_intensity=row.pattern_intensity,
        is_available=bool(row.is_available),
        last_worn=row.last_worn,
        wear_count=row.wear_count or 0,
        image_url=row.image_url,
        colors=tuple(color_from_row(c) for c in sorted(row.colors, key=lambda c: c.rank)),
    )


def recency_cutoff(flt: EligibilityFilter) -> datetime:
    """Garments worn before this instant are rested.

    Something worn on day D becomes eligible again on D + recency_days,
    whatever time of day it was worn.
    """
    day = flt.date - timedelta(days=flt.recency_days - 1)
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class SqlInventory:
    """Garments a user can wear today: available, rested, warm enough, rain-safe."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def eligible_garments(self, flt: EligibilityFilter) -> List[Garment]:
        stmt = (
            select(GarmentModel)
            .where(
                GarmentModel.user_id == flt.user_id,
                GarmentModel.is_available.is_(True),
                GarmentModel.warmth_score >= flt.thermal_band.min_warmth,
                GarmentModel.warmth_score <= flt.thermal_band.max_warmth,
            )
            .options(selectinload(GarmentModel.colors))
            .order_by(GarmentModel.created_at, GarmentModel.id)
        )
        if not flt.override_recency:
            stmt = stmt.where(or_(GarmentModel.last_worn.is_(None), GarmentModel.last_worn < recency_cutoff(flt)))
        if flt.is_rainy:
            stmt = stmt.where(or_(GarmentModel.category != "outerwear", GarmentModel.water_resistant.is_(True)))
        res = await self.session.execute(stmt)
        return [garment_from_row(row) for row in res.scalars().all()]

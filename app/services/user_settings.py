import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.models import UserSettings
from app.services.outfit.types import DEFAULT_WEIGHTS, ScoringWeights, UserPreferences

logger = logging.getLogger(__name__)


def preferences_from_row(row: UserSettings | None) -> UserPreferences:
    if row is None:
        return UserPreferences(recency_days=settings.RECENCY_DAYS_DEFAULT)
    try:
        weights = ScoringWeights.from_mapping(row.outfit_weights)
    except (TypeError, ValueError) as exc:
        logger.warning("ignoring invalid outfit weights for user %s: %s", row.user_id, exc)
        weights = DEFAULT_WEIGHTS
    location = None
    if row.location_lat is not None and row.location_lon is not None:
        location = (row.location_lat, row.location_lon)
    return UserPreferences(
        recency_days=row.recency_days or settings.RECENCY_DAYS_DEFAULT,
        weights=weights,
        location=location,
    )


class SqlSettingsLookup:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str) -> UserPreferences:
        row = await self.session.get(UserSettings, user_id)
        return preferences_from_row(row)

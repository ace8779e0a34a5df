from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.models import GarmentEmbedding


class SqlEmbeddingLookup:
    """Stored CLIP vectors per garment; absent garments map to ``None``."""

    def __init__(self, session: AsyncSession, model: Optional[str] = None) -> None:
        self.session = session
        self.model = model or settings.CLIP_MODEL

    async def get_embeddings(self, garment_ids: Sequence[str]) -> Dict[str, Optional[List[float]]]:
        out: Dict[str, Optional[List[float]]] = {gid: None for gid in garment_ids}
        if not garment_ids:
            return out
        res = await self.session.execute(
            select(GarmentEmbedding.garment_id, GarmentEmbedding.vector).where(
                GarmentEmbedding.garment_id.in_(list(garment_ids)),
                GarmentEmbedding.model == self.model,
            )
        )
        for garment_id, vector in res.all():
            if vector is not None:
                out[str(garment_id)] = [float(v) for v in vector]
        return out


async def upsert_embedding(session: AsyncSession, garment_id: str, vector: List[float], model: Optional[str] = None) -> None:
    model = model or settings.CLIP_MODEL
    stmt = (
        insert(GarmentEmbedding)
        .values(garment_id=garment_id, model=model, vector=vector)
        .on_conflict_do_update(
            index_elements=[GarmentEmbedding.garment_id, GarmentEmbedding.model],
            set_={"vector": vector},
        )
    )
    await session.execute(stmt)

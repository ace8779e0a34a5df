"""Compute CLIP vectors for garments that have an image but no stored embedding.

Usage: python -m scripts.backfill_embeddings [--limit N] [--dry-run]
"""
import argparse
import asyncio
import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError
from sqlalchemy import select

from app.core.config import settings
from app.core.db import SessionLocal
from app.core.errors import EmbeddingInferenceError
from app.models.models import Garment, GarmentEmbedding
from app.services.clip_embeddings import get_embedder
from app.services.embeddings import upsert_embedding

logger = logging.getLogger("scripts.backfill_embeddings")


async def main(limit: int, dry_run: bool) -> None:
    embedder = get_embedder()
    embedder.load()
    done = skipped = 0
    async with SessionLocal() as session, httpx.AsyncClient(timeout=10.0) as http:
        has_embedding = select(GarmentEmbedding.garment_id).where(GarmentEmbedding.model == settings.CLIP_MODEL)
        res = await session.execute(
            select(Garment.id, Garment.image_url)
            .where(Garment.image_url.is_not(None), Garment.id.not_in(has_embedding))
            .limit(limit)
        )
        for garment_id, url in res.all():
            try:
                resp = await http.get(url)
                resp.raise_for_status()
                img = Image.open(io.BytesIO(resp.content))
                vector = embedder.embed(img)
            except (httpx.HTTPError, UnidentifiedImageError, EmbeddingInferenceError) as e:
                logger.warning("skip garment %s: %s", garment_id, e)
                skipped += 1
                continue
            if not dry_run:
                await upsert_embedding(session, str(garment_id), vector)
            done += 1
        if not dry_run:
            await session.commit()
    print(f"embedded={done} skipped={skipped} dry_run={dry_run}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--limit", type=int, default=500)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    asyncio.run(main(args.limit, args.dry_run))

"""In-memory stand-ins for the engine's lookups."""
from app.services.color import LabColor
from app.services.outfit import Garment, UserPreferences
from app.services.weather.thermal import build_snapshot


def make_snapshot(temperature=15.0, condition="cloudy", fallback=False):
    return build_snapshot(
        temperature=temperature,
        feels_like=temperature,
        humidity=50.0,
        wind_speed=5.0,
        precipitation_probability=0.0,
        uv_index=2.0,
        condition=condition,
        fallback=fallback,
    )


def sample_wardrobe():
    grey = (LabColor(50, 0, 0, is_neutral=True),)
    return [
        Garment(id="t1", category="top", warmth_score=2, formality_score=3, colors=grey),
        Garment(id="t2", category="top", warmth_score=3, formality_score=2, colors=(LabColor(45, 30, 20),)),
        Garment(id="b1", category="bottom", warmth_score=2, formality_score=3, colors=grey),
        Garment(id="f1", category="footwear", warmth_score=2, formality_score=3),
        Garment(id="d1", category="dress", warmth_score=3, formality_score=4, colors=(LabColor(60, 10, 40),)),
    ]


class FakeInventory:
    def __init__(self, garments=None, error=None):
        self.garments = sample_wardrobe() if garments is None else garments
        self.error = error
        self.filters = []

    async def eligible_garments(self, flt):
        self.filters.append(flt)
        if self.error:
            raise self.error
        return list(self.garments)


class FakeWeather:
    def __init__(self, snapshot=None, error=None):
        self.snapshot = snapshot or make_snapshot()
        self.error = error
        self.calls = []

    async def fetch(self, lat, lon):
        self.calls.append((lat, lon))
        if self.error:
            raise self.error
        return self.snapshot


class FakeEmbeddings:
    def __init__(self, vectors=None):
        self.vectors = vectors or {}
        self.requested = []

    async def get_embeddings(self, garment_ids):
        self.requested.append(list(garment_ids))
        return {gid: self.vectors.get(gid) for gid in garment_ids}


class FakeSettings:
    def __init__(self, prefs=None):
        self.prefs = prefs or UserPreferences(location=(52.52, 13.41))

    async def get(self, user_id):
        return self.prefs

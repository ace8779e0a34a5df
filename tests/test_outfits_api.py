import pytest
import httpx
from asgi_lifespan import LifespanManager

from app.auth import deps as auth_deps
from app.auth.jwt import mint_access
from app.main import app
from app.routers.outfits import get_outfit_engine
from app.routers.weather import get_weather_client
from app.services.outfit import OutfitEngine, UserPreferences

from tests.fixtures.fakes import FakeEmbeddings, FakeInventory, FakeSettings, FakeWeather, make_snapshot


@pytest.fixture
async def client():
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            yield ac


@pytest.fixture
def use_engine():
    def install(**overrides):
        parts = {
            "inventory": FakeInventory(),
            "weather": FakeWeather(),
            "embeddings": FakeEmbeddings(),
            "user_settings": FakeSettings(),
        }
        parts.update(overrides)
        app.dependency_overrides[get_outfit_engine] = lambda: OutfitEngine(**parts)
        return parts

    yield install
    app.dependency_overrides.pop(get_outfit_engine, None)


@pytest.mark.asyncio
async def test_suggest_outfits(client: httpx.AsyncClient, use_engine):
    use_engine()
    resp = await client.post("/v1/outfits/suggest", json={"date": "2026-10-19"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["weather"]["thermal_band"]["description"] == "Long sleeves or light layers"
    assert body["weather"]["fallback"] is False
    assert len(body["outfits"]) == 3
    first = body["outfits"][0]
    assert first["id"].startswith("temp-")
    assert first["footwear"]["id"] == "f1"
    assert set(first["score_breakdown"]) >= {"color_harmony", "recency_decay", "total"}
    assert first["score"] == pytest.approx(first["score_breakdown"]["total"])
    ids = [o["id"] for o in body["outfits"]]
    assert len(set(ids)) == len(ids)


@pytest.mark.asyncio
async def test_suggest_with_coords(client: httpx.AsyncClient, use_engine):
    parts = use_engine(user_settings=FakeSettings(UserPreferences()))
    resp = await client.post("/v1/outfits/suggest", json={"lat": 40.7, "lon": -74.0, "count": 1})
    assert resp.status_code == 200
    assert len(resp.json()["outfits"]) == 1
    assert parts["weather"].calls == [(40.7, -74.0)]


@pytest.mark.asyncio
async def test_suggest_no_location(client: httpx.AsyncClient, use_engine):
    use_engine(user_settings=FakeSettings(UserPreferences()))
    resp = await client.post("/v1/outfits/suggest", json={})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "no_location"


@pytest.mark.asyncio
async def test_suggest_collaborator_failure(client: httpx.AsyncClient, use_engine):
    use_engine(inventory=FakeInventory(error=RuntimeError("db gone")))
    resp = await client.post("/v1/outfits/suggest", json={})
    assert resp.status_code == 503
    assert resp.json()["detail"] == {"error": "collaborator_failure", "collaborator": "inventory"}


@pytest.mark.asyncio
async def test_suggest_empty_wardrobe(client: httpx.AsyncClient, use_engine):
    use_engine(inventory=FakeInventory(garments=[]))
    resp = await client.post("/v1/outfits/suggest", json={})
    assert resp.status_code == 200
    assert resp.json()["outfits"] == []


@pytest.mark.asyncio
async def test_suggest_validation(client: httpx.AsyncClient, use_engine):
    use_engine()
    assert (await client.post("/v1/outfits/suggest", json={"lat": 10.0})).status_code == 422
    assert (await client.post("/v1/outfits/suggest", json={"count": 0})).status_code == 422
    bad_date = await client.post("/v1/outfits/suggest", json={"date": "yesterday"})
    assert bad_date.status_code == 400
    assert bad_date.json()["detail"] == "invalid_date"


@pytest.mark.asyncio
async def test_suggest_requires_auth(client: httpx.AsyncClient, use_engine):
    use_engine()
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)
    resp = await client.post("/v1/outfits/suggest", json={})
    assert resp.status_code == 401
    resp = await client.post("/v1/outfits/suggest", json={}, headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    token = mint_access("u-42")
    resp = await client.post("/v1/outfits/suggest", json={}, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_weather_endpoint(client: httpx.AsyncClient):
    fake = FakeWeather(make_snapshot(temperature=-5.0, condition="snow"))
    app.dependency_overrides[get_weather_client] = lambda: fake
    try:
        resp = await client.get("/v1/weather", params={"lat": 52.52, "lon": 13.41})
    finally:
        app.dependency_overrides.pop(get_weather_client, None)
    assert resp.status_code == 200
    body = resp.json()
    assert body["location"] == {"lat": 52.52, "lon": 13.41}
    assert body["derived"]["thermal_band"]["min_warmth"] == 5
    assert body["derived"]["is_rainy"] is True
    assert body["fallback"] is False


@pytest.mark.asyncio
async def test_health(client: httpx.AsyncClient):
    resp = await client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_wear_rejects_bad_input(client: httpx.AsyncClient):
    resp = await client.post("/v1/wear", json={"garment_ids": []})
    assert resp.status_code == 422
    resp = await client.post("/v1/wear", json={"garment_ids": ["not-a-uuid"]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_garment_id"


@pytest.mark.asyncio
async def test_only_versioned_routes_are_served(client: httpx.AsyncClient):
    assert (await client.get("/")).status_code == 404

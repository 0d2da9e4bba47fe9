"""Tests for potion endpoints."""

import asyncio
import time

import httpx
from fastapi.testclient import TestClient

from potion_catalog.api.app import create_app
from potion_catalog.containers import AppContainer
from tests.conftest import InMemoryPotionRepository


def _logged_in_client(container: AppContainer) -> TestClient:
    client = TestClient(create_app(container))
    client.post("/auth/register", json={"name": "harry", "password": "azkaban123"})
    response = client.post(
        "/auth/login", json={"name": "harry", "password": "azkaban123"}
    )
    assert response.status_code == 200
    return client


def test_create_list_delete_scenario(container: AppContainer) -> None:
    client = _logged_in_client(container)

    created = client.post(
        "/potions", json={"name": "Elixir", "price": 10, "vendor_id": "v1"}
    )
    assert created.status_code == 201
    potion_id = created.json()["_id"]
    assert potion_id

    by_vendor = client.get("/potions/vendor/v1")
    assert [p["_id"] for p in by_vendor.json()] == [potion_id]

    deleted = client.delete(f"/potions/{potion_id}")
    assert deleted.status_code == 200

    missing = client.get(f"/potions/{potion_id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Potion not found"}


def test_list_and_names(
    container: AppContainer, potion_repository: InMemoryPotionRepository
) -> None:
    potion_repository.add(name="Fire", price=5)
    potion_repository.add(name="Ice", price=7)
    client = TestClient(create_app(container))

    listing = client.get("/potions")
    names = client.get("/potions/names")

    assert listing.status_code == 200
    assert len(listing.json()) == 2
    assert sorted(names.json()) == ["Fire", "Ice"]


def test_price_range_endpoint(
    container: AppContainer, potion_repository: InMemoryPotionRepository
) -> None:
    potion_repository.add(name="Cheap", price=1)
    potion_repository.add(name="Dear", price=100)
    client = TestClient(create_app(container))

    bounded = client.get("/potions/price-range", params={"min": 0, "max": 50})
    malformed = client.get("/potions/price-range", params={"min": "lots"})

    assert [p["name"] for p in bounded.json()] == ["Cheap"]
    assert len(malformed.json()) == 2


def test_vendor_without_potions_is_empty(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/potions/vendor/nobody")

    assert response.status_code == 200
    assert response.json() == []


def test_create_with_invalid_shape_is_400(container: AppContainer) -> None:
    client = _logged_in_client(container)

    response = client.post("/potions", json={"name": "Bad", "price": "free"})

    assert response.status_code == 400
    assert "price" in response.json()["error"]


def test_update_merges_fields(
    container: AppContainer, potion_repository: InMemoryPotionRepository
) -> None:
    potion = potion_repository.add(name="Old", price=3, score=2)
    client = _logged_in_client(container)

    response = client.post(f"/potions/{potion.id}", json={"price": 4})

    assert response.status_code == 200
    assert response.json()["price"] == 4
    assert response.json()["name"] == "Old"
    assert response.json()["score"] == 2


def test_update_and_delete_unknown_id_are_404(container: AppContainer) -> None:
    client = _logged_in_client(container)

    assert client.post("/potions/missing", json={"price": 1}).status_code == 404
    assert client.delete("/potions/missing").status_code == 404


def test_mutations_without_session_never_reach_store(
    container: AppContainer, potion_repository: InMemoryPotionRepository
) -> None:
    potion = potion_repository.add(name="Guarded")
    client = TestClient(create_app(container))

    responses = [
        client.post("/potions", json={"name": "Sneaky"}),
        client.post(f"/potions/{potion.id}", json={"price": 1}),
        client.delete(f"/potions/{potion.id}"),
    ]

    assert [r.status_code for r in responses] == [401, 401, 401]
    assert potion_repository.calls == []


def test_mutations_with_forged_cookie_are_rejected(
    container: AppContainer, potion_repository: InMemoryPotionRepository
) -> None:
    client = TestClient(create_app(container))
    client.cookies.set(container.settings.cookie_name, "forged.token.value")

    response = client.post("/potions", json={"name": "Sneaky"})

    assert response.status_code == 401
    assert potion_repository.calls == []


def test_slow_store_calls_overlap_across_requests(
    container: AppContainer,
    potion_repository: InMemoryPotionRepository,
    monkeypatch,
) -> None:
    store_latency = 0.4
    find = potion_repository.find

    def slow_find(query: dict[str, object]) -> list[object]:
        time.sleep(store_latency)
        return find(query)

    monkeypatch.setattr(potion_repository, "find", slow_find)
    app = create_app(container)

    async def fetch_concurrently() -> list[httpx.Response]:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as client:
            return await asyncio.gather(*(client.get("/potions") for _ in range(4)))

    started = time.perf_counter()
    responses = asyncio.run(fetch_concurrently())
    elapsed = time.perf_counter() - started

    assert [r.status_code for r in responses] == [200] * 4
    assert elapsed < store_latency * 2.5

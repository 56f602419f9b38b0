"""Tests for the public HTTP endpoints."""

import asyncio
from uuid import uuid4

from fastapi.testclient import TestClient

from food_catalog.api.app import create_app
from tests.conftest import make_standard


def _client(container) -> TestClient:  # type: ignore[no-untyped-def]
    container.load_cache()
    return TestClient(create_app(container))


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_loads_cache(container) -> None:
    container.catalog_repository.add_standard(make_standard("김밥"))
    app = create_app(container)

    with TestClient(app):
        assert [food.name for food in container.catalog_cache.standard_foods()] == [
            "김밥"
        ]


def test_lifespan_loads_cache_off_the_event_loop(container, monkeypatch) -> None:
    loop_running: list[bool] = []

    def record_load() -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            loop_running.append(False)
        else:
            loop_running.append(True)

    monkeypatch.setattr(container, "load_cache", record_load)

    with TestClient(create_app(container)):
        pass

    assert loop_running == [False]


def test_resolve_names(container) -> None:
    food = make_standard("된장찌개", categories=["찌개"])
    container.catalog_repository.add_standard(food)
    client = _client(container)

    response = client.post(
        "/foods/resolve",
        json={
            "names": ["된장찌개", "된장뛔개", "완전히다른음식이름"],
            "user_id": str(uuid4()),
        },
    )

    assert response.status_code == 200
    ok, suggestion, new = response.json()["results"]
    assert ok["status"] == "ok"
    assert ok["match"] == {"id": str(food.id), "name": "된장찌개", "kind": "standard"}
    assert suggestion["status"] == "suggestion"
    assert [ref["name"] for ref in suggestion["suggestions"]] == ["된장찌개"]
    assert new["status"] == "new"
    assert new["original_name"] == "완전히다른음식이름"
    assert new["new_entry"]["kind"] == "custom"


def test_resolve_rejects_empty_batch(container) -> None:
    client = _client(container)

    response = client.post("/foods/resolve", json={"names": [], "user_id": str(uuid4())})

    assert response.status_code == 422


def test_resolve_rejects_blank_name(container) -> None:
    client = _client(container)

    response = client.post(
        "/foods/resolve", json={"names": ["김밥", "   "], "user_id": str(uuid4())}
    )

    assert response.status_code == 422
    assert container.catalog_repository.custom == {}


def test_resolve_store_failure_is_503(container) -> None:
    client = _client(container)
    container.catalog_repository.fail_on.add("find_standard_by_name")

    response = client.post(
        "/foods/resolve", json={"names": ["김밥"], "user_id": str(uuid4())}
    )

    assert response.status_code == 503
    assert response.json() == {"detail": "Catalog store unavailable"}


def test_feed(container) -> None:
    container.catalog_repository.add_standard(
        make_standard("김치찌개", categories=["찌개"], review_count=2, total_rating=9),
        make_standard("부대찌개", categories=["찌개"]),
        make_standard("갈비찜", speed="slow", categories=["고기"]),
    )
    client = _client(container)

    response = client.get("/foods/feed", params={"type": "meal", "speed": "fast"})

    assert response.status_code == 200
    [food] = response.json()["foods"]
    assert food["name"] in {"김치찌개", "부대찌개"}
    assert food["speed"] == "fast"


def test_feed_rejects_negative_count(container) -> None:
    client = _client(container)

    response = client.get(
        "/foods/feed", params={"type": "meal", "speed": "fast", "count": -1}
    )

    assert response.status_code == 422


def test_get_standard_food(container) -> None:
    food = make_standard("냉면", review_count=4, total_rating=18)
    container.catalog_repository.add_standard(food)
    client = _client(container)

    response = client.get(f"/foods/{food.id}")

    assert response.status_code == 200
    assert response.json()["average_rating"] == 4.5


def test_get_standard_food_not_found(container) -> None:
    client = _client(container)

    response = client.get(f"/foods/{uuid4()}")

    assert response.status_code == 404


def test_like_and_unlike(container) -> None:
    food = make_standard("삼겹살")
    container.catalog_repository.add_standard(food)
    client = _client(container)
    body = {"user_id": str(uuid4())}

    first = client.post(f"/foods/{food.id}/like", json=body)
    second = client.post(f"/foods/{food.id}/like", json=body)
    removed = client.request("DELETE", f"/foods/{food.id}/like", json=body)

    assert first.json() == {"changed": True}
    assert second.json() == {"changed": False}
    assert removed.json() == {"changed": True}
    assert container.catalog_repository.standard[food.id].like_count == 0


def test_liked_foods_lists_user_likes(container) -> None:
    food, other = make_standard("삼겹살"), make_standard("목살")
    container.catalog_repository.add_standard(food, other)
    client = _client(container)
    user_id = str(uuid4())
    client.post(f"/foods/{food.id}/like", json={"user_id": user_id})

    response = client.get(f"/users/{user_id}/liked-foods")
    empty = client.get(f"/users/{uuid4()}/liked-foods")

    assert response.status_code == 200
    assert response.json() == {"food_ids": [str(food.id)]}
    assert empty.json() == {"food_ids": []}


def test_like_unknown_food_is_404(container) -> None:
    client = _client(container)

    response = client.post(f"/foods/{uuid4()}/like", json={"user_id": str(uuid4())})

    assert response.status_code == 404


def test_custom_food_registration(container) -> None:
    client = _client(container)
    user_id = str(uuid4())

    first = client.post("/custom-foods", json={"name": "우리집 김밥", "user_id": user_id})
    second = client.post("/custom-foods", json={"name": "우리집 김밥", "user_id": user_id})

    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["using_user_ids"] == [user_id]


def test_review_events_update_stats(container) -> None:
    food = make_standard("제육볶음")
    container.catalog_repository.add_standard(food)
    client = _client(container)
    foods = [
        {"food_id": str(food.id), "kind": "standard"},
        {"food_id": str(uuid4()), "kind": "custom"},
    ]

    created = client.post("/reviews/created", json={"foods": foods, "rating": 2})
    edited = client.post(
        "/reviews/edited", json={"foods": foods, "old_rating": 2, "new_rating": 5}
    )

    assert created.status_code == 202
    assert edited.json() == {"status": "accepted"}
    cached = container.catalog_cache.find_standard(food.id)
    assert cached is not None
    assert (cached.review_count, cached.total_rating) == (1, 5)


def test_review_event_with_only_custom_foods(container) -> None:
    client = _client(container)

    response = client.post(
        "/reviews/created",
        json={"foods": [{"food_id": str(uuid4()), "kind": "custom"}], "rating": 3},
    )

    assert response.status_code == 202
    assert "apply_rating_delta" not in container.catalog_repository.calls

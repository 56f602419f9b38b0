"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import pytest

from food_catalog.config import Settings
from food_catalog.containers import AppContainer
from food_catalog.domain.errors import StoreError
from food_catalog.domain.foods import CustomFood, StandardFood
from food_catalog.services.cache import CatalogCache, CatalogRepository
from food_catalog.services.feed import FeedSelector
from food_catalog.services.foods import FoodService, LikeRepository
from food_catalog.services.resolver import NameResolver
from food_catalog.services.stats import StatsAggregator


def make_standard(  # noqa: PLR0913
    name: str,
    *,
    speed: str = "fast",
    type: str = "meal",
    categories: Sequence[str] = (),
    like_count: int = 0,
    review_count: int = 0,
    total_rating: int = 0,
) -> StandardFood:
    return StandardFood(
        id=uuid4(),
        name=name,
        image_url=f"https://images.example.com/{uuid4()}.jpg",
        speed=speed,
        type=type,
        categories=tuple(categories),
        like_count=like_count,
        review_count=review_count,
        total_rating=total_rating,
    )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog store for tests.

    Actions listed in ``fail_on`` raise ``StoreError``.
    """

    standard: dict[UUID, StandardFood] = field(default_factory=dict)
    custom: dict[UUID, CustomFood] = field(default_factory=dict)
    fail_on: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def add_standard(self, *foods: StandardFood) -> None:
        for food in foods:
            self.standard[food.id] = food

    def _record(self, action: str) -> None:
        self.calls.append(action)
        if action in self.fail_on:
            raise StoreError(f"{action} failed")

    def find_standard_by_id(self, food_id: UUID) -> StandardFood | None:
        self._record("find_standard_by_id")
        return self.standard.get(food_id)

    def find_standard_by_name(self, name: str) -> StandardFood | None:
        self._record("find_standard_by_name")
        return next((f for f in self.standard.values() if f.name == name), None)

    def find_custom_by_name(self, name: str) -> CustomFood | None:
        self._record("find_custom_by_name")
        return next((f for f in self.custom.values() if f.name == name), None)

    def list_all_standard(self) -> list[StandardFood]:
        self._record("list_all_standard")
        return list(self.standard.values())

    def list_all_custom(self) -> list[CustomFood]:
        self._record("list_all_custom")
        return list(self.custom.values())

    def insert_standard(self, food: StandardFood) -> StandardFood:
        self._record("insert_standard")
        self.standard[food.id] = food
        return food

    def insert_custom(self, food: CustomFood) -> CustomFood:
        self._record("insert_custom")
        self.custom[food.id] = food
        return food

    def add_user_to_custom(self, food_id: UUID, user_id: UUID) -> None:
        self._record("add_user_to_custom")
        food = self.custom[food_id]
        if user_id not in food.using_user_ids:
            self.custom[food_id] = replace(
                food, using_user_ids=(*food.using_user_ids, user_id)
            )

    def increment_like(self, food_id: UUID, delta: int) -> None:
        self._record("increment_like")
        food = self.standard[food_id]
        self.standard[food_id] = replace(
            food, like_count=max(food.like_count + delta, 0)
        )

    def apply_rating_delta(
        self,
        food_ids: Sequence[UUID],
        review_count_delta: int,
        rating_sum_delta: int,
    ) -> None:
        self._record("apply_rating_delta")
        for food_id in set(food_ids):
            food = self.standard.get(food_id)
            if food is None:
                continue
            self.standard[food_id] = replace(
                food,
                review_count=food.review_count + review_count_delta,
                total_rating=food.total_rating + rating_sum_delta,
            )


@dataclass
class InMemoryLikeRepository(LikeRepository):
    """In-memory like store for tests."""

    likes: set[tuple[UUID, UUID]] = field(default_factory=set)

    def add(self, user_id: UUID, food_id: UUID) -> bool:
        if (user_id, food_id) in self.likes:
            return False
        self.likes.add((user_id, food_id))
        return True

    def remove(self, user_id: UUID, food_id: UUID) -> bool:
        if (user_id, food_id) not in self.likes:
            return False
        self.likes.discard((user_id, food_id))
        return True

    def list_food_ids(self, user_id: UUID) -> list[UUID]:
        return [food_id for owner, food_id in self.likes if owner == user_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        cache_load_backoff_seconds=0.0,
    )


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def like_repository() -> InMemoryLikeRepository:
    return InMemoryLikeRepository()


@pytest.fixture
def catalog_cache() -> CatalogCache:
    return CatalogCache()


@pytest.fixture
def stats_aggregator(
    catalog_repository: InMemoryCatalogRepository, catalog_cache: CatalogCache
) -> StatsAggregator:
    return StatsAggregator(catalog_repository, catalog_cache)


@pytest.fixture
def container(
    settings: Settings,
    catalog_repository: InMemoryCatalogRepository,
    like_repository: InMemoryLikeRepository,
    catalog_cache: CatalogCache,
    stats_aggregator: StatsAggregator,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        catalog_repository=catalog_repository,
        catalog_cache=catalog_cache,
        name_resolver=NameResolver(
            repository=catalog_repository,
            cache=catalog_cache,
            threshold=settings.similarity_threshold,
            max_suggestions=settings.max_suggestions,
        ),
        feed_selector=FeedSelector(catalog_cache),
        stats_aggregator=stats_aggregator,
        food_service=FoodService(
            repository=catalog_repository,
            like_repository=like_repository,
            cache=catalog_cache,
            stats=stats_aggregator,
        ),
    )

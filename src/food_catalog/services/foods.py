"""Catalog lookups, creation and likes."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from food_catalog.domain.errors import DuplicateFoodError, NotFoundError, ValidationError
from food_catalog.domain.foods import (
    FOOD_TYPES,
    SPEEDS,
    CustomFood,
    NewStandardFood,
    StandardFood,
)
from food_catalog.services.cache import CatalogCache, CatalogRepository
from food_catalog.services.stats import StatsAggregator

_logger = logging.getLogger(__name__)


class LikeRepository(Protocol):
    """Persistence interface for which user liked which standard food."""

    def add(self, user_id: UUID, food_id: UUID) -> bool:
        """Record a like; return False if it already existed."""

    def remove(self, user_id: UUID, food_id: UUID) -> bool:
        """Remove a like; return False if there was none."""

    def list_food_ids(self, user_id: UUID) -> list[UUID]:
        """Return the ids of foods a user liked."""


@dataclass
class FoodService:
    """Application service for catalog entries outside name resolution."""

    repository: CatalogRepository
    like_repository: LikeRepository
    cache: CatalogCache
    stats: StatsAggregator

    def get_standard_food(self, food_id: UUID) -> StandardFood:
        """Return a standard food from the store."""
        food = self.repository.find_standard_by_id(food_id)
        if food is None:
            raise NotFoundError(f"Standard food {food_id} not found")
        return food

    def create_standard_food(self, payload: NewStandardFood) -> StandardFood:
        """Create a curated food with zeroed counters."""
        name = payload.name.strip()
        if not name:
            raise ValidationError("Food name is required")
        if payload.speed not in SPEEDS:
            raise ValidationError(f"Unknown speed: {payload.speed}")
        if payload.type not in FOOD_TYPES:
            raise ValidationError(f"Unknown food type: {payload.type}")
        if self.repository.find_standard_by_name(name) is not None:
            raise DuplicateFoodError(f"Standard food {name!r} already exists")

        food = self.repository.insert_standard(
            StandardFood(
                id=uuid4(),
                name=name,
                image_url=payload.image_url,
                speed=payload.speed,
                type=payload.type,
                categories=tuple(payload.categories),
            )
        )
        self.cache.append_standard(food)
        _logger.info("Created standard food: id=%s name=%s", food.id, food.name)
        return food

    def find_or_create_custom_food(self, name: str, user_id: UUID) -> CustomFood:
        """Return the custom food with this exact name, creating it if needed.

        The user is added to the food's users either way.
        """
        if not name.strip():
            raise ValidationError("Food name is required")

        existing = self.repository.find_custom_by_name(name)
        if existing is not None:
            self.repository.add_user_to_custom(existing.id, user_id)
            updated = self.cache.mutate_custom(
                existing.id, lambda food: _with_user(food, user_id)
            )
            return updated or _with_user(existing, user_id)

        food = self.repository.insert_custom(
            CustomFood(
                id=uuid4(),
                name=name,
                using_user_ids=(user_id,),
                created_at=datetime.now(tz=UTC),
            )
        )
        self.cache.append_custom(food)
        return food

    def like_food(self, user_id: UUID, food_id: UUID) -> bool:
        """Like a standard food; return False if it was already liked."""
        self._require_standard(food_id)
        changed = self.like_repository.add(user_id, food_id)
        if changed:
            self.stats.on_like_toggled(food_id, 1)
        return changed

    def unlike_food(self, user_id: UUID, food_id: UUID) -> bool:
        """Unlike a standard food; return False if it wasn't liked."""
        self._require_standard(food_id)
        changed = self.like_repository.remove(user_id, food_id)
        if changed:
            self.stats.on_like_toggled(food_id, -1)
        return changed

    def liked_food_ids(self, user_id: UUID) -> list[UUID]:
        return self.like_repository.list_food_ids(user_id)

    def _require_standard(self, food_id: UUID) -> None:
        if self.cache.find_standard(food_id) is None:
            raise NotFoundError(f"Standard food {food_id} not found")


def _with_user(food: CustomFood, user_id: UUID) -> CustomFood:
    if user_id in food.using_user_ids:
        return food
    return replace(food, using_user_ids=(*food.using_user_ids, user_id))

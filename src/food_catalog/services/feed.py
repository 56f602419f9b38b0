"""Randomized, category-diversified discovery feed."""

import logging
import random
from dataclasses import dataclass, field

from food_catalog.domain.foods import StandardFood
from food_catalog.services.cache import CatalogCache

_logger = logging.getLogger(__name__)


@dataclass
class FeedSelector:
    """Pick standard foods for the main feed."""

    cache: CatalogCache
    rng: random.Random = field(default_factory=random.Random)

    def select(self, food_type: str, speed: str, count: int) -> list[StandardFood]:
        """Return up to ``count`` foods whose categories don't overlap.

        Foods without categories are always eligible. Returning fewer than
        ``count`` foods, or none, is not an error.
        """
        if count <= 0:
            return []
        candidates = self.cache.standard_foods(
            lambda food: food.type == food_type and food.speed == speed
        )
        self.rng.shuffle(candidates)

        selected: list[StandardFood] = []
        used_categories: set[str] = set()
        for food in candidates:
            if len(selected) >= count:
                break
            if used_categories.intersection(food.categories):
                continue
            selected.append(food)
            used_categories.update(food.categories)

        _logger.debug(
            "Feed selected %s/%s foods: type=%s speed=%s",
            len(selected),
            len(candidates),
            food_type,
            speed,
        )
        return selected

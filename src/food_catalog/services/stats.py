"""Like and review statistics for standard foods."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from uuid import UUID

from food_catalog.domain.errors import StoreError, ValidationError
from food_catalog.domain.foods import MAX_RATING, MIN_RATING
from food_catalog.services.cache import CatalogCache, CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class StatsAggregator:
    """Keep like/review/rating counters consistent in the store and cache.

    Every change is written to the store first and mirrored into the cache
    only once the store call returns. The average rating is never stored;
    ``StandardFood.average_rating`` derives it from the counters.
    """

    repository: CatalogRepository
    cache: CatalogCache

    def on_review_created(self, food_ids: Sequence[UUID], rating: int | None) -> None:
        """Count a new rated review against each standard food."""
        ids = _unique(food_ids)
        if not ids or not _is_valid_rating(rating):
            return
        self.repository.apply_rating_delta(
            ids, review_count_delta=1, rating_sum_delta=rating
        )
        self._mirror_rating(ids, review_count_delta=1, rating_sum_delta=rating)

    def on_review_edited(
        self,
        food_ids: Sequence[UUID],
        old_rating: int | None,
        new_rating: int | None,
    ) -> None:
        """Move each food's rating sum from the old rating to the new one.

        The review count never changes. A missing or out-of-range old rating
        counts as 0.
        """
        ids = _unique(food_ids)
        previous = old_rating if _is_valid_rating(old_rating) else 0
        if not ids or not _is_valid_rating(new_rating) or new_rating == previous:
            return
        sum_delta = new_rating - previous
        self.repository.apply_rating_delta(
            ids, review_count_delta=0, rating_sum_delta=sum_delta
        )
        self._mirror_rating(ids, review_count_delta=0, rating_sum_delta=sum_delta)

    def on_like_toggled(self, food_id: UUID, delta: int) -> None:
        """Apply a like (+1) or unlike (-1) to a standard food."""
        if delta not in (1, -1):
            raise ValidationError(f"Like delta must be +1 or -1, got {delta}")
        self.repository.increment_like(food_id, delta)
        self.cache.mutate_standard(
            food_id,
            lambda food: replace(food, like_count=max(food.like_count + delta, 0)),
        )

    def propagate_review_created(
        self, food_ids: Sequence[UUID], rating: int | None
    ) -> None:
        """Background variant of ``on_review_created`` that logs failures."""
        try:
            self.on_review_created(food_ids, rating)
        except StoreError:
            _logger.exception(
                "Failed to apply review stats", extra={"food_ids": list(food_ids)}
            )

    def propagate_review_edited(
        self,
        food_ids: Sequence[UUID],
        old_rating: int | None,
        new_rating: int | None,
    ) -> None:
        """Background variant of ``on_review_edited`` that logs failures."""
        try:
            self.on_review_edited(food_ids, old_rating, new_rating)
        except StoreError:
            _logger.exception(
                "Failed to apply edited review stats",
                extra={"food_ids": list(food_ids)},
            )

    def _mirror_rating(
        self, food_ids: list[UUID], review_count_delta: int, rating_sum_delta: int
    ) -> None:
        for food_id in food_ids:
            self.cache.mutate_standard(
                food_id,
                lambda food: replace(
                    food,
                    review_count=food.review_count + review_count_delta,
                    total_rating=food.total_rating + rating_sum_delta,
                ),
            )


def _is_valid_rating(rating: int | None) -> bool:
    return rating is not None and MIN_RATING <= rating <= MAX_RATING


def _unique(food_ids: Sequence[UUID]) -> list[UUID]:
    return list(dict.fromkeys(food_ids))

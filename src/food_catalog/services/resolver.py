"""Resolve free-text food names against the catalogs."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from food_catalog.domain.errors import ValidationError
from food_catalog.domain.foods import (
    CustomFood,
    FoodKind,
    FoodRef,
    MatchCandidate,
    ResolutionResult,
    ResolutionStatus,
)
from food_catalog.services.cache import CatalogCache, CatalogRepository
from food_catalog.services.similarity import score

SIMILARITY_THRESHOLD = 0.75
MAX_SUGGESTIONS = 3

_logger = logging.getLogger(__name__)


@dataclass
class NameResolver:
    """Classify submitted names as exact matches, suggestions or new entries.

    Exact matches are literal: casing and whitespace must agree. Only the
    fuzzy path normalizes names.
    """

    repository: CatalogRepository
    cache: CatalogCache
    threshold: float = SIMILARITY_THRESHOLD
    max_suggestions: int = MAX_SUGGESTIONS

    def resolve(self, names: list[str], user_id: UUID) -> list[ResolutionResult]:
        """Resolve each name in order.

        A store error aborts the batch. Names resolved before the failure keep
        their effects; retrying is safe because "ok" and "new" outcomes are
        keyed by the literal name.
        """
        if not names:
            raise ValidationError("At least one food name is required")
        if any(not name.strip() for name in names):
            raise ValidationError("Food names must not be blank")
        return [self._resolve_one(name, user_id) for name in names]

    def _resolve_one(self, name: str, user_id: UUID) -> ResolutionResult:
        standard = self.repository.find_standard_by_name(name)
        if standard is not None:
            return ResolutionResult(
                status=ResolutionStatus.OK,
                original_name=name,
                match=FoodRef(id=standard.id, name=standard.name, kind=FoodKind.STANDARD),
            )

        custom = self.repository.find_custom_by_name(name)
        if custom is not None:
            return ResolutionResult(
                status=ResolutionStatus.OK,
                original_name=name,
                match=FoodRef(id=custom.id, name=custom.name, kind=FoodKind.CUSTOM),
            )

        candidates = self._candidates(name)
        if not candidates:
            created = self._register(name, user_id)
            return ResolutionResult(
                status=ResolutionStatus.NEW,
                original_name=name,
                new_entry=FoodRef(id=created.id, name=created.name, kind=FoodKind.CUSTOM),
            )

        candidates.sort(key=lambda candidate: candidate.score, reverse=True)
        return ResolutionResult(
            status=ResolutionStatus.SUGGESTION,
            original_name=name,
            suggestions=tuple(
                candidate.to_ref() for candidate in candidates[: self.max_suggestions]
            ),
        )

    def _candidates(self, name: str) -> list[MatchCandidate]:
        snapshot = self.cache.snapshot()
        candidates = []
        for kind, foods in (
            (FoodKind.STANDARD, snapshot.standard),
            (FoodKind.CUSTOM, snapshot.custom),
        ):
            for food in foods:
                similarity = score(name, food.name)
                if similarity >= self.threshold:
                    candidates.append(
                        MatchCandidate(
                            score=similarity, id=food.id, name=food.name, kind=kind
                        )
                    )
        return candidates

    def _register(self, name: str, user_id: UUID) -> CustomFood:
        def persist() -> CustomFood:
            return self.repository.insert_custom(
                CustomFood(
                    id=uuid4(),
                    name=name,
                    using_user_ids=(user_id,),
                    created_at=datetime.now(tz=UTC),
                )
            )

        created = self.cache.append_custom_after(persist)
        _logger.info("Registered custom food: id=%s name=%s", created.id, name)
        return created

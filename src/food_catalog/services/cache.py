"""In-process mirror of the standard and custom food catalogs."""

import logging
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Protocol, TypeVar
from uuid import UUID

from food_catalog.domain.errors import StoreError
from food_catalog.domain.foods import CatalogSnapshot, CustomFood, StandardFood

_logger = logging.getLogger(__name__)

_Food = TypeVar("_Food", StandardFood, CustomFood)


class CatalogRepository(Protocol):
    """Durable store for standard and custom foods.

    Lookups return ``None`` on a miss. Every method raises ``StoreError``
    when the underlying store fails.
    """

    def find_standard_by_id(self, food_id: UUID) -> StandardFood | None:
        """Return a standard food by id, if present."""

    def find_standard_by_name(self, name: str) -> StandardFood | None:
        """Return a standard food by exact name, if present."""

    def find_custom_by_name(self, name: str) -> CustomFood | None:
        """Return a custom food by exact name, if present."""

    def list_all_standard(self) -> list[StandardFood]:
        """Return every standard food."""

    def list_all_custom(self) -> list[CustomFood]:
        """Return every custom food."""

    def insert_standard(self, food: StandardFood) -> StandardFood:
        """Persist a new standard food and return it."""

    def insert_custom(self, food: CustomFood) -> CustomFood:
        """Persist a new custom food and return it."""

    def add_user_to_custom(self, food_id: UUID, user_id: UUID) -> None:
        """Add a user to a custom food's users, ignoring duplicates."""

    def increment_like(self, food_id: UUID, delta: int) -> None:
        """Add ``delta`` to a standard food's like count."""

    def apply_rating_delta(
        self,
        food_ids: Sequence[UUID],
        review_count_delta: int,
        rating_sum_delta: int,
    ) -> None:
        """Add the deltas to the review counters of the given standard foods."""


class ReadWriteLock:
    """Writer-preferring reader/writer lock.

    Not reentrant: a thread holding either side must not acquire again.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._waiting_writers = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._waiting_writers:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writing or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


class CatalogCache:
    """Shared-read, single-writer mirror of both catalogs.

    Mutations are applied only after the corresponding store write has
    succeeded, so readers never see data the store does not have.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._standard: list[StandardFood] = []
        self._custom: list[CustomFood] = []

    def load(
        self,
        repository: CatalogRepository,
        attempts: int = 1,
        backoff_seconds: float = 0.0,
    ) -> None:
        """Replace the cache contents with everything in the store."""
        attempt = 0
        while True:
            try:
                standard = repository.list_all_standard()
                custom = repository.list_all_custom()
                break
            except StoreError as exc:
                attempt += 1
                _logger.warning(
                    "Catalog load failed (attempt %s/%s): %s", attempt, attempts, exc
                )
                if attempt >= attempts:
                    raise
                time.sleep(backoff_seconds)

        with self._lock.write_locked():
            self._standard = list(standard)
            self._custom = list(custom)
        _logger.info(
            "Catalog cache loaded: standard=%s custom=%s", len(standard), len(custom)
        )

    def snapshot(self) -> CatalogSnapshot:
        """Return both collections as read under a single shared lock."""
        with self._lock.read_locked():
            return CatalogSnapshot(
                standard=tuple(self._standard), custom=tuple(self._custom)
            )

    def read_all(
        self, predicate: Callable[[StandardFood | CustomFood], bool]
    ) -> list[StandardFood | CustomFood]:
        """Return standard then custom foods matching the predicate."""
        with self._lock.read_locked():
            return [
                food
                for food in (*self._standard, *self._custom)
                if predicate(food)
            ]

    def standard_foods(
        self, predicate: Callable[[StandardFood], bool] | None = None
    ) -> list[StandardFood]:
        with self._lock.read_locked():
            if predicate is None:
                return list(self._standard)
            return [food for food in self._standard if predicate(food)]

    def custom_foods(
        self, predicate: Callable[[CustomFood], bool] | None = None
    ) -> list[CustomFood]:
        with self._lock.read_locked():
            if predicate is None:
                return list(self._custom)
            return [food for food in self._custom if predicate(food)]

    def find_standard(self, food_id: UUID) -> StandardFood | None:
        with self._lock.read_locked():
            return _find(self._standard, food_id)

    def find_custom(self, food_id: UUID) -> CustomFood | None:
        with self._lock.read_locked():
            return _find(self._custom, food_id)

    def append_standard(self, food: StandardFood) -> None:
        with self._lock.write_locked():
            self._standard.append(food)

    def append_custom(self, food: CustomFood) -> None:
        with self._lock.write_locked():
            self._custom.append(food)

    def append_custom_after(self, persist: Callable[[], CustomFood]) -> CustomFood:
        """Run ``persist`` and append its result, holding the write lock for both.

        If ``persist`` raises, nothing is appended and the error propagates.
        """
        with self._lock.write_locked():
            food = persist()
            self._custom.append(food)
            return food

    def mutate_standard(
        self, food_id: UUID, update: Callable[[StandardFood], StandardFood]
    ) -> StandardFood | None:
        """Replace a standard food with ``update(food)``; a miss is a no-op."""
        with self._lock.write_locked():
            return _replace(self._standard, food_id, update)

    def mutate_custom(
        self, food_id: UUID, update: Callable[[CustomFood], CustomFood]
    ) -> CustomFood | None:
        """Replace a custom food with ``update(food)``; a miss is a no-op."""
        with self._lock.write_locked():
            return _replace(self._custom, food_id, update)


def _find(foods: list[_Food], food_id: UUID) -> _Food | None:
    for food in foods:
        if food.id == food_id:
            return food
    return None


def _replace(
    foods: list[_Food], food_id: UUID, update: Callable[[_Food], _Food]
) -> _Food | None:
    for index, food in enumerate(foods):
        if food.id == food_id:
            updated = update(food)
            foods[index] = updated
            return updated
    return None

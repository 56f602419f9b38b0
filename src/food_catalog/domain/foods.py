"""Domain models for the standard and custom food catalogs."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

SPEEDS = ("fast", "slow")
FOOD_TYPES = ("meal", "dessert")
MIN_RATING = 1
MAX_RATING = 5


class FoodKind(str, Enum):
    """Which catalog a food entry belongs to."""

    STANDARD = "standard"
    CUSTOM = "custom"


class ResolutionStatus(str, Enum):
    """Outcome of resolving a free-text food name."""

    OK = "ok"
    SUGGESTION = "suggestion"
    NEW = "new"


@dataclass(frozen=True)
class StandardFood:
    """Curated catalog entry with aggregate review statistics."""

    id: UUID
    name: str
    image_url: str
    speed: str
    type: str
    categories: tuple[str, ...] = ()
    like_count: int = 0
    review_count: int = 0
    total_rating: int = 0

    @property
    def average_rating(self) -> float:
        """Average rating derived from the counters, 0 when unrated."""
        if self.review_count > 0:
            return self.total_rating / self.review_count
        return 0.0


@dataclass(frozen=True)
class CustomFood:
    """User-contributed catalog entry."""

    id: UUID
    name: str
    using_user_ids: tuple[UUID, ...]
    created_at: datetime


@dataclass(frozen=True)
class NewStandardFood:
    """Admin input for a new standard food."""

    name: str
    image_url: str
    speed: str
    type: str
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class CatalogSnapshot:
    """Point-in-time copy of both catalog collections."""

    standard: tuple[StandardFood, ...]
    custom: tuple[CustomFood, ...]


@dataclass(frozen=True)
class FoodRef:
    """Reference to a catalog entry returned to callers."""

    id: UUID
    name: str
    kind: FoodKind


@dataclass(frozen=True)
class MatchCandidate:
    """Scored fuzzy match produced while resolving a name."""

    score: float
    id: UUID
    name: str
    kind: FoodKind

    def to_ref(self) -> FoodRef:
        return FoodRef(id=self.id, name=self.name, kind=self.kind)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome for a single submitted food name."""

    status: ResolutionStatus
    original_name: str
    match: FoodRef | None = None
    suggestions: tuple[FoodRef, ...] = field(default_factory=tuple)
    new_entry: FoodRef | None = None

"""Supabase implementation of the food catalog store."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from food_catalog.domain.errors import StoreError
from food_catalog.domain.foods import CustomFood, StandardFood
from food_catalog.services.cache import CatalogRepository

STANDARD_TABLE = "standard_foods"
CUSTOM_TABLE = "custom_foods"


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for standard and custom foods.

    Counter updates go through Postgres functions so concurrent increments
    are applied atomically by the database.
    """

    client: Client

    def find_standard_by_id(self, food_id: UUID) -> StandardFood | None:
        """Return a standard food by id, if present."""
        response = _execute(
            self.client.table(STANDARD_TABLE)
            .select("*")
            .eq("id", str(food_id))
            .limit(1),
            "find standard food",
        )
        if not response.data:
            return None
        return _parse_standard(response.data[0])

    def find_standard_by_name(self, name: str) -> StandardFood | None:
        """Return a standard food by exact name, if present."""
        response = _execute(
            self.client.table(STANDARD_TABLE).select("*").eq("name", name).limit(1),
            "find standard food",
        )
        if not response.data:
            return None
        return _parse_standard(response.data[0])

    def find_custom_by_name(self, name: str) -> CustomFood | None:
        """Return a custom food by exact name, if present."""
        response = _execute(
            self.client.table(CUSTOM_TABLE).select("*").eq("name", name).limit(1),
            "find custom food",
        )
        if not response.data:
            return None
        return _parse_custom(response.data[0])

    def list_all_standard(self) -> list[StandardFood]:
        """Return every standard food."""
        response = _execute(
            self.client.table(STANDARD_TABLE).select("*"), "list standard foods"
        )
        return [_parse_standard(row) for row in response.data or []]

    def list_all_custom(self) -> list[CustomFood]:
        """Return every custom food."""
        response = _execute(
            self.client.table(CUSTOM_TABLE).select("*"), "list custom foods"
        )
        return [_parse_custom(row) for row in response.data or []]

    def insert_standard(self, food: StandardFood) -> StandardFood:
        """Persist a new standard food and return the stored row."""
        response = _execute(
            self.client.table(STANDARD_TABLE).insert(
                {
                    "id": str(food.id),
                    "name": food.name,
                    "image_url": food.image_url,
                    "speed": food.speed,
                    "type": food.type,
                    "categories": list(food.categories),
                    "like_count": food.like_count,
                    "review_count": food.review_count,
                    "total_rating": food.total_rating,
                }
            ),
            "insert standard food",
        )
        if not response.data:
            raise StoreError("Failed to create standard food")
        return _parse_standard(response.data[0])

    def insert_custom(self, food: CustomFood) -> CustomFood:
        """Persist a new custom food and return the stored row."""
        response = _execute(
            self.client.table(CUSTOM_TABLE).insert(
                {
                    "id": str(food.id),
                    "name": food.name,
                    "using_user_ids": [str(user_id) for user_id in food.using_user_ids],
                    "created_at": food.created_at.isoformat(),
                }
            ),
            "insert custom food",
        )
        if not response.data:
            raise StoreError("Failed to create custom food")
        return _parse_custom(response.data[0])

    def add_user_to_custom(self, food_id: UUID, user_id: UUID) -> None:
        """Add a user to a custom food's users, ignoring duplicates."""
        _execute(
            self.client.rpc(
                "add_custom_food_user",
                {"p_food_id": str(food_id), "p_user_id": str(user_id)},
            ),
            "add custom food user",
        )

    def increment_like(self, food_id: UUID, delta: int) -> None:
        """Add ``delta`` to a standard food's like count."""
        _execute(
            self.client.rpc(
                "increment_like_count",
                {"p_food_id": str(food_id), "p_delta": delta},
            ),
            "increment like count",
        )

    def apply_rating_delta(
        self,
        food_ids: Sequence[UUID],
        review_count_delta: int,
        rating_sum_delta: int,
    ) -> None:
        """Add the deltas to the review counters of the given standard foods."""
        if not food_ids:
            return
        _execute(
            self.client.rpc(
                "apply_review_stats",
                {
                    "p_food_ids": [str(food_id) for food_id in food_ids],
                    "p_review_count_delta": review_count_delta,
                    "p_rating_sum_delta": rating_sum_delta,
                },
            ),
            "apply review stats",
        )


def _execute(query, action: str):  # type: ignore[no-untyped-def]
    """Execute a query, translating PostgREST failures into ``StoreError``."""
    try:
        return query.execute()
    except APIError as exc:
        raise StoreError(f"Supabase {action} failed: {exc}") from exc


def _parse_standard(row: dict[str, object]) -> StandardFood:
    """Parse a standard food row into a domain model."""
    return StandardFood(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        image_url=str(row.get("image_url") or ""),
        speed=str(row.get("speed", "")),
        type=str(row.get("type", "")),
        categories=tuple(row.get("categories") or ()),
        like_count=int(row.get("like_count") or 0),
        review_count=int(row.get("review_count") or 0),
        total_rating=int(row.get("total_rating") or 0),
    )


def _parse_custom(row: dict[str, object]) -> CustomFood:
    """Parse a custom food row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return CustomFood(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        using_user_ids=tuple(
            UUID(str(user_id)) for user_id in row.get("using_user_ids") or ()
        ),
        created_at=created_at,
    )
